"""
Byte-level filesystem primitives used by the version control core.

Working-tree files are plain files directly inside the repository root.
Objects live one file per id inside an object directory and are never
overwritten once written.
"""

import os
from pathlib import Path
from typing import List


def exists(path: Path) -> bool:
    """Return True if path names an existing regular file."""
    return path.is_file()


def read_bytes(path: Path) -> bytes:
    return path.read_bytes()


def write_bytes(path: Path, data: bytes) -> None:
    path.write_bytes(data)


def delete(path: Path) -> bool:
    """
    Delete a file if present.

    Returns:
        True if a file was removed, False if there was nothing to remove
    """
    if path.is_file():
        path.unlink()
        return True
    return False


def list_plain_files(directory: Path) -> List[str]:
    """List names of regular files directly inside directory, sorted."""
    if not directory.is_dir():
        return []
    return sorted(entry.name for entry in directory.iterdir() if entry.is_file())


def write_atomic(path: Path, data: bytes) -> None:
    """Write a file atomically using temp file + rename.

    Args:
        path: Target path
        data: Data to write
    """
    temp_path = path.with_name(f".{path.name}.tmp")
    try:
        with open(temp_path, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path)
    except Exception:
        if temp_path.exists():
            temp_path.unlink()
        raise


def persist_object(directory: Path, object_id: str, data: bytes) -> bool:
    """
    Store an object under its id unless it is already present.

    Args:
        directory: Object directory (commits or blobs)
        object_id: Content digest naming the object
        data: Serialized object

    Returns:
        True if the object was written, False if it already existed
    """
    object_file = directory / object_id
    if object_file.exists():
        return False
    write_atomic(object_file, data)
    return True


def load_object(directory: Path, object_id: str) -> bytes:
    """Load the serialized object stored under object_id.

    Raises:
        FileNotFoundError: If no object with that id is stored
    """
    return (directory / object_id).read_bytes()


def list_object_ids(directory: Path) -> List[str]:
    """List ids of all objects in directory in lexicographic order."""
    return [name for name in list_plain_files(directory) if not name.startswith(".")]
