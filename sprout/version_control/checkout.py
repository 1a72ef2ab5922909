"""
Checkout engine: brings working-tree files in line with a commit.
"""

from typing import List

from sprout.logging import get_sprout_logger

from . import fileio
from .context import RepositoryContext
from .errors import FileNotInCommitError, UntrackedFileConflictError
from .objects import Commit

log = get_sprout_logger("checkout")


class CheckoutEngine:
    """
    Writes commit contents into the working tree.

    Whole-tree checkout refuses to run while untracked files are present, so a
    branch switch or reset never overwrites work the repository does not know
    about.
    """

    def __init__(self, ctx: RepositoryContext):
        self.ctx = ctx

    def untracked_files(self) -> List[str]:
        return self.ctx.untracked_files()

    def ensure_no_untracked_files(self) -> None:
        """
        Raises:
            UntrackedFileConflictError: If any working-tree file is untracked
        """
        untracked = self.untracked_files()
        if untracked:
            log.info("Untracked files block checkout", untracked=untracked)
            raise UntrackedFileConflictError(untracked)

    def write_file(self, commit: Commit, filename: str) -> None:
        """Overwrite a working-tree file with its version in commit."""
        blob = self.ctx.store.get_blob(commit.files[filename])
        fileio.write_bytes(self.ctx.working_path(filename), blob.content)

    def checkout_file(self, commit: Commit, filename: str) -> None:
        """
        Restore a single file from a commit.

        Args:
            commit: Commit holding the wanted version
            filename: File to restore

        Raises:
            FileNotInCommitError: If the commit does not track the file
        """
        if not commit.tracks(filename):
            raise FileNotInCommitError(filename)

        self.write_file(commit, filename)
        self.ctx.state.staged_removals.discard(filename)
        log.info(
            "Checked out {filename} from {commit_id:.8}",
            filename=filename,
            commit_id=commit.commit_id,
        )

    def checkout_all(self, target: Commit) -> List[str]:
        """
        Replace the tracked working-tree files with those of target.

        The untracked-file check runs before anything is written.

        Args:
            target: Commit to check out

        Returns:
            Filenames deleted because target does not track them

        Raises:
            UntrackedFileConflictError: If untracked files are present
        """
        self.ensure_no_untracked_files()

        outgoing = self.ctx.head_commit()
        for filename in target.files:
            self.write_file(target, filename)

        deleted = [name for name in outgoing.files if not target.tracks(name)]
        for filename in deleted:
            fileio.delete(self.ctx.working_path(filename))

        log.info(
            "Checked out {commit_id:.8}",
            commit_id=target.commit_id,
            written=len(target.files),
            deleted=len(deleted),
        )
        return deleted
