"""
Version control core: objects, staging, branches, checkout and merge.

Provides git-like operations for snapshotting a working directory.
"""

from .objects import (
    Blob,
    Commit,
    ObjectKind,
    compute_blob_id,
    compute_commit_id,
    create_timestamp,
)

from .state import RepositoryState
from .storage import ObjectStore, RepositoryLayout, StateStore
from .context import RepositoryContext
from .staging import StagingArea, RemovalOutcome
from .checkout import CheckoutEngine
from .branches import BranchManager
from .graph import CommitGraph, ancestor_distances, find_split_point

from .merge import (
    MergeEngine,
    MergeResult,
    MergeOutcome,
    MergeAction,
    FileMergeDecision,
    classify,
    build_conflict_content,
)

from .status import (
    RepositoryStatus,
    FileChange,
    ChangeType,
    compute_status,
)

from .repository import Repository
from .errors import SproutError

__all__ = [
    # Objects
    "Blob",
    "Commit",
    "ObjectKind",
    "compute_blob_id",
    "compute_commit_id",
    "create_timestamp",
    # State and storage
    "RepositoryState",
    "ObjectStore",
    "RepositoryLayout",
    "StateStore",
    "RepositoryContext",
    # Components
    "StagingArea",
    "RemovalOutcome",
    "CheckoutEngine",
    "BranchManager",
    "CommitGraph",
    "ancestor_distances",
    "find_split_point",
    # Merge
    "MergeEngine",
    "MergeResult",
    "MergeOutcome",
    "MergeAction",
    "FileMergeDecision",
    "classify",
    "build_conflict_content",
    # Status
    "RepositoryStatus",
    "FileChange",
    "ChangeType",
    "compute_status",
    # Facade
    "Repository",
    "SproutError",
]
