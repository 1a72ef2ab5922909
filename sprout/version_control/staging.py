"""
Staging area: pending additions and removals layered on the HEAD commit.
"""

from enum import Enum
from typing import Optional

from sprout.logging import get_sprout_logger

from . import fileio
from .context import RepositoryContext
from .errors import FileNotFoundInWorkingTreeError, NothingToRemoveError

log = get_sprout_logger("staging")


class RemovalOutcome(str, Enum):
    """What ``stage_remove`` did with a file."""

    UNSTAGED = "unstaged"
    STAGED_FOR_REMOVAL = "staged_for_removal"


class StagingArea:
    """
    Records which files the next commit adds or removes.

    Example:
        >>> staging = StagingArea(ctx)
        >>> staging.stage_add("notes.txt")
        >>> staging.stage_remove("old.txt")
    """

    def __init__(self, ctx: RepositoryContext):
        self.ctx = ctx

    def stage_add(self, filename: str) -> Optional[str]:
        """
        Stage the working-tree version of a file for addition.

        Content identical to the committed version drops any staged entry.
        Content identical to the staged version leaves the stage unchanged.

        Args:
            filename: Working-tree filename

        Returns:
            Id of the staged blob, or None if the file matches HEAD

        Raises:
            FileNotFoundInWorkingTreeError: If the file does not exist
        """
        if not fileio.exists(self.ctx.working_path(filename)):
            raise FileNotFoundInWorkingTreeError(filename)

        state = self.ctx.state
        state.staged_removals.discard(filename)

        blob = self.ctx.read_working_blob(filename)
        committed_id = self.ctx.head_commit().blob_id_for(filename)

        if blob.blob_id == committed_id:
            if state.staged_additions.pop(filename, None) is not None:
                log.debug("Unstaged {filename}: matches HEAD", filename=filename)
            return None

        if state.staged_additions.get(filename) != blob.blob_id:
            self.ctx.store.put(blob)
            state.stage_addition(filename, blob.blob_id)
            log.debug(
                "Staged {filename} for addition", filename=filename, blob_id=blob.blob_id
            )
        return blob.blob_id

    def stage_remove(self, filename: str) -> RemovalOutcome:
        """
        Stage a file for removal, or drop a pending addition.

        A file tracked by HEAD is also deleted from the working tree.

        Raises:
            NothingToRemoveError: If the file is neither staged nor tracked
        """
        state = self.ctx.state
        if filename in state.staged_additions:
            del state.staged_additions[filename]
            return RemovalOutcome.UNSTAGED

        if self.ctx.head_commit().tracks(filename):
            state.stage_removal(filename)
            fileio.delete(self.ctx.working_path(filename))
            log.debug("Staged {filename} for removal", filename=filename)
            return RemovalOutcome.STAGED_FOR_REMOVAL

        raise NothingToRemoveError(filename)

    def clear(self) -> None:
        self.ctx.state.clear_staging()

    def is_empty(self) -> bool:
        return not self.ctx.state.has_staged_changes()
