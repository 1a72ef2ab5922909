"""
Status computation for the working tree.

Compares the working tree against HEAD and the staging area.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from .context import RepositoryContext


class ChangeType(str, Enum):
    """Type of an unstaged change."""

    MODIFIED = "modified"
    DELETED = "deleted"


@dataclass
class FileChange:
    """A working-tree change that is not staged."""

    filename: str
    change_type: ChangeType

    def summary(self) -> str:
        return f"{self.filename} ({self.change_type.value})"


@dataclass
class RepositoryStatus:
    """
    Snapshot of branches, staged changes, and working-tree changes.
    """

    current_branch: str
    branches: List[str]
    staged: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    unstaged: List[FileChange] = field(default_factory=list)
    untracked: List[str] = field(default_factory=list)

    def is_clean(self) -> bool:
        """Check if there is nothing staged, changed or untracked."""
        return not (self.staged or self.removed or self.unstaged or self.untracked)

    def count_by_type(self) -> Dict[str, int]:
        counts = {change_type.value: 0 for change_type in ChangeType}
        for change in self.unstaged:
            counts[change.change_type.value] += 1
        return counts

    def summary(self) -> str:
        """Generate a one-line summary of the status."""
        if self.is_clean():
            return f"On branch {self.current_branch}, nothing to commit"

        parts = []
        if self.staged:
            parts.append(f"{len(self.staged)} staged")
        if self.removed:
            parts.append(f"{len(self.removed)} removed")
        if self.unstaged:
            parts.append(f"{len(self.unstaged)} not staged")
        if self.untracked:
            parts.append(f"{len(self.untracked)} untracked")
        return f"On branch {self.current_branch}: " + ", ".join(parts)

    def format(self) -> str:
        """
        Format status for display.

        Returns:
            Five sections: branches (current marked with *), staged files,
            removed files, unstaged modifications, untracked files
        """
        lines = ["=== Branches ==="]
        for branch in self.branches:
            lines.append(f"*{branch}" if branch == self.current_branch else branch)
        lines.append("")

        lines.append("=== Staged Files ===")
        lines.extend(self.staged)
        lines.append("")

        lines.append("=== Removed Files ===")
        lines.extend(self.removed)
        lines.append("")

        lines.append("=== Modifications Not Staged For Commit ===")
        lines.extend(change.summary() for change in self.unstaged)
        lines.append("")

        lines.append("=== Untracked Files ===")
        lines.extend(self.untracked)
        lines.append("")
        return "\n".join(lines)


def compute_status(ctx: RepositoryContext) -> RepositoryStatus:
    """
    Compute the status of a repository.

    Args:
        ctx: Repository context

    Returns:
        RepositoryStatus for the working tree
    """
    state = ctx.state
    head = ctx.head_commit()
    working = set(ctx.working_files())

    # Version each file is expected to have in the working tree
    expected: Dict[str, str] = {
        name: blob_id
        for name, blob_id in head.files.items()
        if name not in state.staged_removals
    }
    expected.update(state.staged_additions)

    unstaged: List[FileChange] = []
    for filename, blob_id in sorted(expected.items()):
        if filename not in working:
            unstaged.append(FileChange(filename, ChangeType.DELETED))
        elif ctx.read_working_blob(filename).blob_id != blob_id:
            unstaged.append(FileChange(filename, ChangeType.MODIFIED))

    return RepositoryStatus(
        current_branch=state.current_branch,
        branches=state.branch_names(),
        staged=sorted(state.staged_additions),
        removed=sorted(state.staged_removals),
        unstaged=unstaged,
        untracked=ctx.untracked_files(),
    )
