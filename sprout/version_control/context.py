"""
Explicit context shared by the version control components.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List

from . import fileio
from .objects import Blob, Commit
from .state import RepositoryState
from .storage import ObjectStore, RepositoryLayout


@dataclass
class RepositoryContext:
    """
    Everything an operation needs: where the repository lives, the object
    store, and the current mutable state.

    Components keep a reference to the context and read ``state`` on every
    call, so the repository can swap in a freshly loaded state.
    """

    layout: RepositoryLayout
    store: ObjectStore
    state: RepositoryState

    def head_commit(self) -> Commit:
        return self.store.get_commit(self.state.head)

    def working_path(self, filename: str) -> Path:
        return self.layout.working_path(filename)

    def working_files(self) -> List[str]:
        return fileio.list_plain_files(self.layout.root)

    def read_working_blob(self, filename: str) -> Blob:
        """Snapshot a working-tree file as a blob (not stored)."""
        return Blob.create(filename, fileio.read_bytes(self.working_path(filename)))

    def untracked_files(self) -> List[str]:
        """Working-tree files neither tracked by HEAD nor staged for addition."""
        head = self.head_commit()
        return [
            filename
            for filename in self.working_files()
            if not head.tracks(filename)
            and filename not in self.state.staged_additions
        ]
