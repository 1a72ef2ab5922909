"""
Shared fixtures for Sprout tests.
"""

from pathlib import Path
from typing import Callable

import pytest

from sprout.version_control import Repository


@pytest.fixture
def repo(tmp_path: Path) -> Repository:
    """A freshly initialized repository rooted in a temporary directory."""
    return Repository.init(tmp_path)


@pytest.fixture
def write(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a text file into the working tree."""

    def _write(filename: str, content: str) -> Path:
        path = tmp_path / filename
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def read(tmp_path: Path) -> Callable[[str], str]:
    """Read a text file from the working tree."""

    def _read(filename: str) -> str:
        return (tmp_path / filename).read_text()

    return _read
