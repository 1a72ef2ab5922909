"""
Storage backend for version control system.

Handles persistence of objects and the repository state document to disk.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union
import os

from sprout.config import config
from sprout.logging import get_sprout_logger

from . import fileio
from .errors import (
    AmbiguousIdError,
    NoSuchCommitError,
    NoSuchObjectError,
    RepositoryLockedError,
)
from .objects import ID_LENGTH, Blob, Commit, ObjectKind
from .state import RepositoryState

log = get_sprout_logger("objects")


class RepositoryLayout:
    """
    Paths of a repository on disk.

    - <root>/              working tree (plain files only)
      - .sprout/
        - commits/
          - {commit_id}    (one JSON document per commit)
        - blobs/
          - {blob_id}      (one JSON document per blob)
        - repository.json  (branches, HEAD, staging area)
        - repository.lock  (present while a command mutates state)
    """

    def __init__(self, root: Path, control_dir: Optional[str] = None):
        """
        Initialize layout.

        Args:
            root: Working tree root
            control_dir: Name of the control directory inside root
        """
        self.root = Path(root)
        self.control_dir = self.root / (control_dir or config.repository.control_dir)
        self.commits_dir = self.control_dir / "commits"
        self.blobs_dir = self.control_dir / "blobs"
        self.state_file = self.control_dir / "repository.json"
        self.lock_file = self.control_dir / "repository.lock"

    def is_initialized(self) -> bool:
        return self.state_file.exists()

    def ensure_directories(self) -> None:
        """Ensure all necessary directories exist."""
        self.commits_dir.mkdir(parents=True, exist_ok=True)
        self.blobs_dir.mkdir(parents=True, exist_ok=True)

    def object_dir(self, kind: ObjectKind) -> Path:
        return self.commits_dir if kind == ObjectKind.COMMIT else self.blobs_dir

    def working_path(self, filename: str) -> Path:
        return self.root / filename


StoredObject = Union[Blob, Commit]


class ObjectStore:
    """
    Content-addressed store for blobs and commits.

    Writes are idempotent: an id already present on disk is never rewritten.
    Objects read once are cached for the rest of the invocation.
    """

    def __init__(self, layout: RepositoryLayout):
        self.layout = layout
        self._commits: Dict[str, Commit] = {}
        self._blobs: Dict[str, Blob] = {}

    def put(self, obj: StoredObject) -> str:
        """
        Persist an object under its digest.

        Args:
            obj: Blob or commit to store

        Returns:
            The object's id
        """
        if isinstance(obj, Commit):
            kind, object_id, payload = ObjectKind.COMMIT, obj.commit_id, obj.to_json()
            self._commits[object_id] = obj
        else:
            kind, object_id, payload = ObjectKind.BLOB, obj.blob_id, obj.to_json()
            self._blobs[object_id] = obj

        written = fileio.persist_object(
            self.layout.object_dir(kind), object_id, payload.encode("utf-8")
        )
        if written:
            log.debug("Stored {kind} {object_id:.8}", kind=kind.value, object_id=object_id)
        return object_id

    def get_commit(self, commit_id: str) -> Commit:
        """Load a commit by exact id.

        Raises:
            NoSuchCommitError: If no commit has that id
        """
        if commit_id not in self._commits:
            try:
                data = fileio.load_object(self.layout.commits_dir, commit_id)
            except FileNotFoundError:
                raise NoSuchCommitError(commit_id) from None
            self._commits[commit_id] = Commit.from_json(data.decode("utf-8"))
        return self._commits[commit_id]

    def get_blob(self, blob_id: str) -> Blob:
        """Load a blob by exact id.

        Raises:
            NoSuchObjectError: If no blob has that id
        """
        if blob_id not in self._blobs:
            try:
                data = fileio.load_object(self.layout.blobs_dir, blob_id)
            except FileNotFoundError:
                raise NoSuchObjectError(ObjectKind.BLOB.value, blob_id) from None
            self._blobs[blob_id] = Blob.from_json(data.decode("utf-8"))
        return self._blobs[blob_id]

    def list_commit_ids(self) -> List[str]:
        """List all commit ids in lexicographic order."""
        return fileio.list_object_ids(self.layout.commits_dir)

    def get_by_prefix(self, prefix: str, kind: ObjectKind = ObjectKind.COMMIT) -> str:
        """
        Resolve an abbreviated id to the full id of a stored object.

        Args:
            prefix: Leading characters of an object id
            kind: Which object directory to search

        Returns:
            The unique full id starting with prefix

        Raises:
            AmbiguousIdError: If more than one id starts with prefix
            NoSuchCommitError: If no commit id starts with prefix
            NoSuchObjectError: If no blob id starts with prefix
        """
        if len(prefix) == ID_LENGTH:
            candidates = [prefix] if (self.layout.object_dir(kind) / prefix).is_file() else []
        else:
            candidates = [
                object_id
                for object_id in fileio.list_object_ids(self.layout.object_dir(kind))
                if prefix and object_id.startswith(prefix)
            ]

        if not candidates:
            if kind == ObjectKind.COMMIT:
                raise NoSuchCommitError(prefix)
            raise NoSuchObjectError(kind.value, prefix)
        if len(candidates) > 1:
            raise AmbiguousIdError(prefix, candidates)
        return candidates[0]


class StateStore:
    """Loads and saves the repository state document."""

    def __init__(self, layout: RepositoryLayout):
        self.layout = layout

    def load(self) -> RepositoryState:
        return RepositoryState.from_json(self.layout.state_file.read_text())

    def save(self, state: RepositoryState) -> None:
        """Replace the state document atomically."""
        fileio.write_atomic(self.layout.state_file, state.to_json().encode("utf-8"))

    def _create_lock(self) -> int:
        return os.open(self.layout.lock_file, os.O_CREAT | os.O_EXCL | os.O_WRONLY)

    def _holder_alive(self) -> bool:
        """
        Check whether the process recorded in the lock file is still running.

        A lock whose pid cannot be read counts as held.
        """
        try:
            pid = int(self.layout.lock_file.read_text().strip())
        except (OSError, ValueError):
            return True
        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            return False
        except PermissionError:
            return True
        return True

    @contextmanager
    def locked(self) -> Iterator[None]:
        """
        Hold the repository lock for the duration of the block.

        A lock left behind by a process that no longer runs is removed and
        taken over.

        Raises:
            RepositoryLockedError: If a running process holds the lock
        """
        lock_file = self.layout.lock_file
        try:
            fd = self._create_lock()
        except FileExistsError:
            if self._holder_alive():
                raise RepositoryLockedError(str(lock_file)) from None
            log.warning("Removing stale lock {lock_file}", lock_file=str(lock_file))
            lock_file.unlink(missing_ok=True)
            try:
                fd = self._create_lock()
            except FileExistsError:
                raise RepositoryLockedError(str(lock_file)) from None
        try:
            try:
                os.write(fd, str(os.getpid()).encode("ascii"))
            finally:
                os.close(fd)
            yield
        finally:
            self.layout.lock_file.unlink(missing_ok=True)
