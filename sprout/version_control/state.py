"""
Mutable repository state: branch pointers, HEAD and the staging area.

The state holds only ids and names. Object contents live in the object store.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Set
import json


@dataclass
class RepositoryState:
    """
    Branches, the active branch, HEAD, and staged changes.

    A filename is never staged for addition and for removal at once.

    Attributes:
        branches: Branch name -> tip commit id
        current_branch: Name of the active branch
        head: Commit id the working tree reflects
        staged_additions: Filename -> blob id queued for the next commit
        staged_removals: Filenames queued for exclusion from the next commit
    """

    branches: Dict[str, str]
    current_branch: str
    head: str
    staged_additions: Dict[str, str] = field(default_factory=dict)
    staged_removals: Set[str] = field(default_factory=set)

    @classmethod
    def initial(cls, branch: str, commit_id: str) -> "RepositoryState":
        """State of a freshly initialized repository."""
        return cls(branches={branch: commit_id}, current_branch=branch, head=commit_id)

    def branch_names(self) -> List[str]:
        return sorted(self.branches)

    def move_branch(self, branch: str, commit_id: str) -> None:
        """Point a branch at a commit, moving HEAD along if it is current."""
        self.branches[branch] = commit_id
        if branch == self.current_branch:
            self.head = commit_id

    def stage_addition(self, filename: str, blob_id: str) -> None:
        self.staged_removals.discard(filename)
        self.staged_additions[filename] = blob_id

    def stage_removal(self, filename: str) -> None:
        self.staged_additions.pop(filename, None)
        self.staged_removals.add(filename)

    def unstage(self, filename: str) -> None:
        self.staged_additions.pop(filename, None)
        self.staged_removals.discard(filename)

    def clear_staging(self) -> None:
        self.staged_additions = {}
        self.staged_removals = set()

    def has_staged_changes(self) -> bool:
        return bool(self.staged_additions or self.staged_removals)

    def to_dict(self) -> Dict[str, Any]:
        """Convert state to dictionary for serialization."""
        return {
            "branches": dict(sorted(self.branches.items())),
            "current_branch": self.current_branch,
            "head": self.head,
            "staged_additions": dict(sorted(self.staged_additions.items())),
            "staged_removals": sorted(self.staged_removals),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RepositoryState":
        """Create state from dictionary."""
        return cls(
            branches=dict(data["branches"]),
            current_branch=data["current_branch"],
            head=data["head"],
            staged_additions=dict(data.get("staged_additions", {})),
            staged_removals=set(data.get("staged_removals", [])),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> "RepositoryState":
        return cls.from_dict(json.loads(json_str))
