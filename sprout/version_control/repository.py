"""
Repository facade: one method per user-facing command.

Each mutating command runs as a transaction: the state document is locked
and reloaded, the command mutates the in-memory state, and the state is
written back atomically only if the command succeeds.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from sprout.config import RepositoryConfig, config
from sprout.logging import get_sprout_logger, performance_monitor, track_operation

from .branches import BranchManager
from .checkout import CheckoutEngine
from .context import RepositoryContext
from .errors import NotARepositoryError, RepositoryExistsError
from .graph import CommitGraph
from .merge import MergeEngine, MergeResult
from .objects import ID_LENGTH, Commit, ObjectKind
from .staging import RemovalOutcome, StagingArea
from .state import RepositoryState
from .status import RepositoryStatus, compute_status
from .storage import ObjectStore, RepositoryLayout, StateStore

log = get_sprout_logger("repository")


class Repository:
    """
    A working tree under version control.

    Example:
        >>> repo = Repository.init(Path("project"))
        >>> repo.add("notes.txt")
        >>> repo.commit("Add notes")
        >>> repo.branch("feature")
        >>> repo.checkout_branch("feature")
    """

    def __init__(self, root: Path, repo_config: Optional[RepositoryConfig] = None):
        """
        Open an existing repository.

        Args:
            root: Working tree root containing the control directory
            repo_config: Repository settings (default: global config)

        Raises:
            NotARepositoryError: If root holds no repository
        """
        self.config = repo_config or config.repository
        self.layout = RepositoryLayout(Path(root), self.config.control_dir)
        if not self.layout.is_initialized():
            raise NotARepositoryError()

        self._states = StateStore(self.layout)
        self.ctx = RepositoryContext(
            layout=self.layout,
            store=ObjectStore(self.layout),
            state=self._states.load(),
        )
        self.staging = StagingArea(self.ctx)
        self.checkout = CheckoutEngine(self.ctx)
        self.branches = BranchManager(self.ctx, self.checkout)
        self.graph = CommitGraph(self.ctx)
        self.merger = MergeEngine(
            self.ctx, self.graph, self.staging, self.checkout, self.branches
        )

    @classmethod
    def init(
        cls, root: Path, repo_config: Optional[RepositoryConfig] = None
    ) -> "Repository":
        """
        Create a repository with a root commit on the default branch.

        Raises:
            RepositoryExistsError: If root already holds a repository
        """
        repo_config = repo_config or config.repository
        layout = RepositoryLayout(Path(root), repo_config.control_dir)
        if layout.control_dir.exists():
            raise RepositoryExistsError()

        layout.ensure_directories()
        store = ObjectStore(layout)
        initial = Commit.create(
            message=repo_config.initial_message, parent_id=None, files={}
        )
        store.put(initial)
        StateStore(layout).save(
            RepositoryState.initial(repo_config.default_branch, initial.commit_id)
        )

        log.info(
            "Initialized repository in {path}",
            path=str(layout.control_dir),
            commit_id=initial.commit_id,
            branch=repo_config.default_branch,
        )
        return cls(root, repo_config)

    @property
    def state(self) -> RepositoryState:
        return self.ctx.state

    @property
    def current_branch(self) -> str:
        return self.ctx.state.current_branch

    def head_commit(self) -> Commit:
        return self.ctx.head_commit()

    @contextmanager
    def _transaction(self) -> Iterator[RepositoryState]:
        """Lock, reload, and on success persist the repository state."""
        with self._states.locked():
            self.ctx.state = self._states.load()
            try:
                yield self.ctx.state
            except Exception:
                self.ctx.state = self._states.load()
                raise
            self._states.save(self.ctx.state)

    def resolve_commit(self, commit_id: str) -> Commit:
        """
        Resolve a full or abbreviated commit id.

        Raises:
            NoSuchCommitError: If no commit matches
            AmbiguousIdError: If an abbreviation matches several commits
        """
        if len(commit_id) < ID_LENGTH:
            commit_id = self.ctx.store.get_by_prefix(commit_id, ObjectKind.COMMIT)
        return self.ctx.store.get_commit(commit_id)

    @track_operation("add")
    def add(self, filename: str) -> Optional[str]:
        """Stage a working-tree file for addition."""
        with self._transaction():
            return self.staging.stage_add(filename)

    @track_operation("commit")
    def commit(self, message: str) -> Commit:
        """Commit the staged changes on the current branch."""
        with self._transaction():
            return self.graph.commit(message)

    @track_operation("rm")
    def rm(self, filename: str) -> RemovalOutcome:
        """Unstage a file, or stage a tracked file for removal."""
        with self._transaction():
            return self.staging.stage_remove(filename)

    def log(self) -> Iterator[Commit]:
        """History of HEAD along primary parents, newest first."""
        return self.graph.log_from(self.ctx.state.head)

    def global_log(self) -> Iterator[Commit]:
        """Every commit ever made, in id order."""
        return self.graph.all_commits()

    def find(self, message: str) -> List[str]:
        """Ids of commits with exactly this message."""
        return self.graph.find_by_message(message)

    def status(self) -> RepositoryStatus:
        return compute_status(self.ctx)

    @track_operation("checkout_file")
    def checkout_file(self, filename: str) -> None:
        """Restore a file to its version at HEAD."""
        with self._transaction():
            self.checkout.checkout_file(self.ctx.head_commit(), filename)

    @track_operation("checkout_commit_file")
    def checkout_commit_file(self, commit_id: str, filename: str) -> None:
        """Restore a file to its version in a given commit."""
        with self._transaction():
            self.checkout.checkout_file(self.resolve_commit(commit_id), filename)

    @track_operation("checkout_branch")
    @performance_monitor(threshold_ms=2000.0)
    def checkout_branch(self, branch: str) -> Commit:
        """Switch the working tree and HEAD to another branch."""
        with self._transaction():
            return self.branches.switch(branch)

    @track_operation("branch")
    def branch(self, name: str) -> str:
        """Create a branch at HEAD."""
        with self._transaction():
            return self.branches.create_branch(name)

    @track_operation("rm_branch")
    def rm_branch(self, name: str) -> None:
        """Delete a branch pointer."""
        with self._transaction():
            self.branches.delete_branch(name)

    @track_operation("reset")
    @performance_monitor(threshold_ms=2000.0)
    def reset(self, commit_id: str) -> Commit:
        """Check out a commit and move the current branch to it."""
        with self._transaction() as state:
            target = self.resolve_commit(commit_id)
            self.checkout.checkout_all(target)
            self.branches.advance(state.current_branch, target.commit_id)
            self.staging.clear()
            return target

    @track_operation("merge")
    @performance_monitor(threshold_ms=2000.0)
    def merge(self, branch: str) -> MergeResult:
        """Merge a branch into the current branch."""
        with self._transaction():
            return self.merger.merge(branch)
