"""
Three-way merge of another branch into the current branch.

Each filename across the split point and both branch tips is classified into
an action. Files changed differently on both sides are rewritten with
conflict markers and staged; the merge then ends in a commit with two parents.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from sprout.logging import get_sprout_logger

from . import fileio
from .branches import BranchManager
from .checkout import CheckoutEngine
from .context import RepositoryContext
from .errors import NoSuchBranchError, SelfMergeError, UncommittedChangesError
from .graph import CommitGraph
from .objects import Commit
from .staging import StagingArea

log = get_sprout_logger("merge")

CONFLICT_START = b"<<<<<<< HEAD\n"
CONFLICT_SEPARATOR = b"=======\n"
CONFLICT_END = b">>>>>>>"


class MergeOutcome(str, Enum):
    """How a merge ended."""

    MERGED = "merged"
    FAST_FORWARD = "fast_forward"
    ALREADY_MERGED = "already_merged"


class MergeAction(str, Enum):
    """What happens to one file during a merge."""

    CONFLICT = "conflict"
    REMOVE = "remove"
    TAKE_THEIRS = "take_theirs"
    KEEP = "keep"


@dataclass
class FileMergeDecision:
    """The action chosen for one filename."""

    filename: str
    action: MergeAction

    def summary(self) -> str:
        return f"{self.action.value}: {self.filename}"


@dataclass
class MergeResult:
    """Result of merging a branch into the current branch."""

    outcome: MergeOutcome
    branch: str
    into: str
    split_id: str
    commit: Optional[Commit] = None
    decisions: List[FileMergeDecision] = field(default_factory=list)

    @property
    def conflicts(self) -> List[str]:
        return [
            d.filename for d in self.decisions if d.action == MergeAction.CONFLICT
        ]

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    def summary(self) -> str:
        if self.outcome == MergeOutcome.FAST_FORWARD:
            return "Current branch fast-forwarded."
        if self.outcome == MergeOutcome.ALREADY_MERGED:
            return "Given branch is an ancestor of the current branch."

        changed = [d for d in self.decisions if d.action != MergeAction.KEEP]
        parts = [f"Merged {self.branch} into {self.into}"]
        if changed:
            parts.append(f"{len(changed)} files changed")
        if self.conflicts:
            parts.append(f"{len(self.conflicts)} conflicts")
        return ", ".join(parts)


def classify(
    filename: str,
    split_files: Dict[str, str],
    this_files: Dict[str, str],
    that_files: Dict[str, str],
) -> MergeAction:
    """
    Decide what a merge does with one file.

    A side counts as modified when the file existed at the split point and
    that side's version differs from it, deletion included.

    Args:
        filename: File being classified
        split_files: File mapping of the split point
        this_files: File mapping of the current branch tip
        that_files: File mapping of the merged branch tip

    Returns:
        The merge action for the file
    """
    in_split = filename in split_files
    in_this = filename in this_files
    in_that = filename in that_files

    split_id = split_files.get(filename)
    this_id = this_files.get(filename)
    that_id = that_files.get(filename)

    this_modified = in_split and this_id != split_id
    that_modified = in_split and that_id != split_id

    # Both sides ended at the same version, deletion on both included
    if this_id == that_id:
        return MergeAction.KEEP

    if this_modified and that_modified:
        return MergeAction.CONFLICT
    if not in_split and in_this and in_that:
        return MergeAction.CONFLICT

    if in_split and in_this and not in_that:
        return MergeAction.REMOVE

    if (not in_split and not in_this and in_that) or (
        in_split and not this_modified and that_modified
    ):
        return MergeAction.TAKE_THEIRS

    return MergeAction.KEEP


def build_conflict_content(ours: Optional[bytes], theirs: Optional[bytes]) -> bytes:
    """
    Combine both versions of a file between conflict markers.

    A missing side contributes nothing; a present side is followed by a
    newline.
    """
    ours_part = ours + b"\n" if ours is not None else b""
    theirs_part = theirs + b"\n" if theirs is not None else b""
    return CONFLICT_START + ours_part + CONFLICT_SEPARATOR + theirs_part + CONFLICT_END


class MergeEngine:
    """
    Merges a branch into the current branch.

    Example:
        >>> result = engine.merge("feature")
        >>> if result.has_conflicts:
        ...     print("Encountered a merge conflict.")
    """

    def __init__(
        self,
        ctx: RepositoryContext,
        graph: CommitGraph,
        staging: StagingArea,
        checkout: CheckoutEngine,
        branches: BranchManager,
    ):
        self.ctx = ctx
        self.graph = graph
        self.staging = staging
        self.checkout = checkout
        self.branches = branches

    def merge(self, branch: str) -> MergeResult:
        """
        Merge branch into the current branch.

        Args:
            branch: Name of the branch to merge in

        Returns:
            MergeResult describing the outcome

        Raises:
            UntrackedFileConflictError: If untracked files are present
            UncommittedChangesError: If the staging area is not empty
            NoSuchBranchError: If branch does not exist
            SelfMergeError: If branch is the current branch
        """
        self.checkout.ensure_no_untracked_files()
        if not self.staging.is_empty():
            raise UncommittedChangesError()
        if not self.branches.exists(branch):
            raise NoSuchBranchError(branch)
        current = self.branches.current
        if branch == current:
            raise SelfMergeError(branch)

        this_id = self.ctx.state.head
        that_id = self.branches.tip(branch)
        split = self.graph.find_ancestor(this_id, that_id)

        if split.commit_id == this_id:
            self.branches.switch(branch)
            log.info("Fast-forwarded to {branch}", branch=branch, commit_id=that_id)
            return MergeResult(MergeOutcome.FAST_FORWARD, branch, current, split.commit_id)

        if split.commit_id == that_id:
            log.info("{branch} is already merged", branch=branch)
            return MergeResult(MergeOutcome.ALREADY_MERGED, branch, current, split.commit_id)

        this_commit = self.ctx.store.get_commit(this_id)
        that_commit = self.ctx.store.get_commit(that_id)
        decisions = self._apply(split, this_commit, that_commit)

        commit = self.graph.commit(
            f"Merged {branch} into {current}.", second_parent_id=that_id
        )
        result = MergeResult(
            MergeOutcome.MERGED, branch, current, split.commit_id, commit, decisions
        )
        if result.has_conflicts:
            log.info(
                "Encountered a merge conflict.", branch=branch, files=result.conflicts
            )
        log.info(
            "Merged {branch} into {into} as {commit_id:.8}",
            branch=branch,
            into=current,
            commit_id=commit.commit_id,
            split=split.commit_id,
            changed=len(decisions),
        )
        return result

    def _apply(
        self, split: Commit, this_commit: Commit, that_commit: Commit
    ) -> List[FileMergeDecision]:
        """Classify every file and realize the actions in the working tree."""
        filenames = sorted(
            set(split.files) | set(this_commit.files) | set(that_commit.files)
        )

        decisions = []
        for filename in filenames:
            action = classify(filename, split.files, this_commit.files, that_commit.files)
            if action == MergeAction.CONFLICT:
                content = build_conflict_content(
                    self._content(this_commit, filename),
                    self._content(that_commit, filename),
                )
                fileio.write_bytes(self.ctx.working_path(filename), content)
                self.staging.stage_add(filename)
            elif action == MergeAction.REMOVE:
                self.staging.stage_remove(filename)
            elif action == MergeAction.TAKE_THEIRS:
                self.checkout.write_file(that_commit, filename)
                self.staging.stage_add(filename)
            decisions.append(FileMergeDecision(filename, action))
        return decisions

    def _content(self, commit: Commit, filename: str) -> Optional[bytes]:
        blob_id = commit.blob_id_for(filename)
        if blob_id is None:
            return None
        return self.ctx.store.get_blob(blob_id).content
