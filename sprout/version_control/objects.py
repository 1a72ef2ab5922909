"""
Object model for version control.

Defines the two content-addressed object kinds: blobs (one file's name and
bytes) and commits (a snapshot of the tracked file set plus parent links).
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Any, Optional, Tuple
import base64
import hashlib
import json

from sprout.config import config


ID_LENGTH = 40


class ObjectKind(str, Enum):
    """Kinds of objects kept in the object store."""

    BLOB = "blob"
    COMMIT = "commit"


def compute_blob_id(name: str, content: bytes) -> str:
    """
    Digest of a file's name and bytes.

    A NUL byte separates the two; it cannot occur in a filename, so every
    (name, content) pair encodes to distinct bytes.
    """
    digest = hashlib.sha1()
    digest.update(name.encode("utf-8"))
    digest.update(b"\0")
    digest.update(content)
    return digest.hexdigest()


def compute_commit_id(
    message: str,
    parent_id: Optional[str],
    timestamp: str,
    files: Dict[str, str],
    second_parent_id: Optional[str] = None,
) -> str:
    """Digest of a commit's message, parents, timestamp and file mapping."""
    payload: Dict[str, Any] = {
        "message": message,
        "parent": parent_id,
        "timestamp": timestamp,
        "files": files,
    }
    if second_parent_id is not None:
        payload["merge_parent"] = second_parent_id
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha1(canonical.encode("utf-8")).hexdigest()


def create_timestamp(moment: Optional[datetime] = None) -> str:
    """Format a commit timestamp in local time."""
    moment = moment or datetime.now()
    return moment.astimezone().strftime(config.repository.timestamp_format)


@dataclass(frozen=True)
class Blob:
    """
    Immutable snapshot of one file's content.

    Attributes:
        blob_id: Digest over name and content
        name: Filename the content was staged under
        content: Raw file bytes
    """

    blob_id: str
    name: str
    content: bytes

    @classmethod
    def create(cls, name: str, content: bytes) -> "Blob":
        """Create a blob, deriving its id from name and content."""
        return cls(blob_id=compute_blob_id(name, content), name=name, content=content)

    def to_dict(self) -> Dict[str, Any]:
        """Convert blob to dictionary for serialization."""
        return {
            "blob_id": self.blob_id,
            "name": self.name,
            "content": base64.b64encode(self.content).decode("ascii"),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Blob":
        """Create blob from dictionary."""
        return cls(
            blob_id=data["blob_id"],
            name=data["name"],
            content=base64.b64decode(data["content"]),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> "Blob":
        return cls.from_dict(json.loads(json_str))


@dataclass(frozen=True)
class Commit:
    """
    Represents a commit in the version history.

    A commit maps every tracked filename to the id of the blob holding its
    content. Merge commits carry a second parent, the tip of the branch that
    was merged in.
    """

    commit_id: str
    message: str
    timestamp: str
    parent_id: Optional[str] = None
    second_parent_id: Optional[str] = None
    files: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        message: str,
        parent_id: Optional[str],
        files: Dict[str, str],
        second_parent_id: Optional[str] = None,
        timestamp: Optional[str] = None,
    ) -> "Commit":
        """Create a commit, deriving its id from its semantic fields."""
        timestamp = timestamp or create_timestamp()
        sorted_files = dict(sorted(files.items()))
        return cls(
            commit_id=compute_commit_id(
                message, parent_id, timestamp, sorted_files, second_parent_id
            ),
            message=message,
            timestamp=timestamp,
            parent_id=parent_id,
            second_parent_id=second_parent_id,
            files=sorted_files,
        )

    @property
    def parents(self) -> Tuple[Optional[str], Optional[str]]:
        return (self.parent_id, self.second_parent_id)

    @property
    def is_merge(self) -> bool:
        return self.second_parent_id is not None

    def tracks(self, filename: str) -> bool:
        return filename in self.files

    def blob_id_for(self, filename: str) -> Optional[str]:
        return self.files.get(filename)

    def to_dict(self) -> Dict[str, Any]:
        """Convert commit to dictionary for serialization."""
        return {
            "commit_id": self.commit_id,
            "message": self.message,
            "timestamp": self.timestamp,
            "parent_id": self.parent_id,
            "second_parent_id": self.second_parent_id,
            "files": self.files,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Commit":
        """Create commit from dictionary."""
        return cls(
            commit_id=data["commit_id"],
            message=data["message"],
            timestamp=data["timestamp"],
            parent_id=data.get("parent_id"),
            second_parent_id=data.get("second_parent_id"),
            files=dict(sorted(data.get("files", {}).items())),
        )

    def to_json(self) -> str:
        """Convert commit to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> "Commit":
        """Create commit from JSON string."""
        return cls.from_dict(json.loads(json_str))
