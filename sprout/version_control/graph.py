"""
Commit graph: creating commits, walking history, and finding split points.
"""

from collections import deque
from typing import Dict, Iterator, List, Optional, Protocol, Set

from sprout.logging import get_sprout_logger

from .context import RepositoryContext
from .errors import (
    EmptyMessageError,
    NoCommonAncestorError,
    NoMatchingCommitError,
    NothingToCommitError,
)
from .objects import Commit

log = get_sprout_logger("graph")


class CommitSource(Protocol):
    """Anything commits can be read from by id."""

    def get_commit(self, commit_id: str) -> Commit: ...

    def list_commit_ids(self) -> List[str]: ...


def ancestor_distances(source: CommitSource, commit_id: str) -> Dict[str, int]:
    """
    Breadth-first distances from commit_id to each of its ancestors.

    Both parent links are followed; the commit itself is at distance 0.
    """
    distances = {commit_id: 0}
    queue = deque([commit_id])
    while queue:
        current = queue.popleft()
        for parent in source.get_commit(current).parents:
            if parent is not None and parent not in distances:
                distances[parent] = distances[current] + 1
                queue.append(parent)
    return distances


def find_split_point(source: CommitSource, first: str, second: str) -> Commit:
    """
    Nearest common ancestor of two commits.

    Common ancestors that are themselves ancestors of another common ancestor
    are discarded. Of the rest, the one with the smallest combined distance
    from both commits wins, ties broken by id, so the result does not depend
    on argument order.

    Raises:
        NoCommonAncestorError: If the commits share no history
    """
    from_first = ancestor_distances(source, first)
    from_second = ancestor_distances(source, second)
    common = set(from_first) & set(from_second)
    if not common:
        raise NoCommonAncestorError(first, second)

    redundant: Set[str] = set()
    for candidate in sorted(common, key=lambda c: from_first[c] + from_second[c]):
        if candidate in redundant:
            continue
        older = ancestor_distances(source, candidate)
        redundant.update(c for c in older if c != candidate and c in common)

    best = min(
        common - redundant,
        key=lambda c: (from_first[c] + from_second[c], c),
    )
    return source.get_commit(best)


class CommitGraph:
    """
    Reads and extends the commit history.

    Example:
        >>> graph = CommitGraph(ctx)
        >>> commit = graph.commit("Add parser")
        >>> [c.message for c in graph.log_from(commit.commit_id)]
    """

    def __init__(self, ctx: RepositoryContext):
        self.ctx = ctx

    def commit(self, message: str, second_parent_id: Optional[str] = None) -> Commit:
        """
        Fold the staging area into a new commit on the current branch.

        Args:
            message: Commit message
            second_parent_id: Tip of the merged branch, for merge commits

        Returns:
            The new commit

        Raises:
            EmptyMessageError: If message is blank
            NothingToCommitError: If nothing is staged (merge commits excepted)
        """
        if not message or not message.strip():
            raise EmptyMessageError()

        state = self.ctx.state
        if not state.has_staged_changes() and second_parent_id is None:
            raise NothingToCommitError()

        parent = self.ctx.head_commit()
        files = dict(parent.files)
        files.update(state.staged_additions)
        for filename in state.staged_removals:
            files.pop(filename, None)

        commit = Commit.create(
            message=message,
            parent_id=parent.commit_id,
            files=files,
            second_parent_id=second_parent_id,
        )
        self.ctx.store.put(commit)

        state.move_branch(state.current_branch, commit.commit_id)
        state.clear_staging()

        log.info(
            "Committed {commit_id:.8}: {message}",
            commit_id=commit.commit_id,
            message=message,
            branch=state.current_branch,
        )
        return commit

    def log_from(self, commit_id: str) -> Iterator[Commit]:
        """Yield commits along primary parent links, newest first."""
        current: Optional[str] = commit_id
        while current is not None:
            commit = self.ctx.store.get_commit(current)
            yield commit
            current = commit.parent_id

    def all_commits(self) -> Iterator[Commit]:
        """Yield every stored commit in id order."""
        for commit_id in self.ctx.store.list_commit_ids():
            yield self.ctx.store.get_commit(commit_id)

    def find_by_message(self, text: str) -> List[str]:
        """
        Ids of every commit whose message equals text exactly.

        Raises:
            NoMatchingCommitError: If no commit matches
        """
        matches = [c.commit_id for c in self.all_commits() if c.message == text]
        if not matches:
            raise NoMatchingCommitError(text)
        return matches

    def find_ancestor(self, first: str, second: str) -> Commit:
        return find_split_point(self.ctx.store, first, second)
