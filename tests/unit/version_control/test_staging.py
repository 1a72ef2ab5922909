"""
Unit tests for the staging area.
"""

import pytest

from sprout.version_control import Blob, RemovalOutcome, Repository
from sprout.version_control.errors import (
    FileNotFoundInWorkingTreeError,
    NothingToRemoveError,
)


class TestStageAdd:
    """Tests for StagingArea.stage_add."""

    def test_stage_new_file(self, repo: Repository, write) -> None:
        write("a.txt", "x")

        blob_id = repo.staging.stage_add("a.txt")

        assert blob_id == Blob.create("a.txt", b"x").blob_id
        assert repo.state.staged_additions == {"a.txt": blob_id}
        assert repo.ctx.store.get_blob(blob_id).content == b"x"

    def test_missing_file(self, repo: Repository) -> None:
        with pytest.raises(FileNotFoundInWorkingTreeError):
            repo.staging.stage_add("absent.txt")
        assert repo.staging.is_empty()

    def test_restage_same_content_is_noop(self, repo: Repository, write) -> None:
        """Test that adding unchanged content twice leaves one entry."""
        write("a.txt", "x")
        repo.staging.stage_add("a.txt")
        before = dict(repo.state.staged_additions)

        repo.staging.stage_add("a.txt")

        assert repo.state.staged_additions == before

    def test_restage_new_content_replaces_entry(self, repo: Repository, write) -> None:
        write("a.txt", "x")
        repo.staging.stage_add("a.txt")
        write("a.txt", "y")

        blob_id = repo.staging.stage_add("a.txt")

        assert repo.state.staged_additions == {"a.txt": blob_id}
        assert blob_id == Blob.create("a.txt", b"y").blob_id

    def test_revert_to_committed_unstages(self, repo: Repository, write) -> None:
        """Test that content matching HEAD drops a stale staged entry."""
        write("a.txt", "x")
        repo.add("a.txt")
        repo.commit("add a")

        write("a.txt", "y")
        repo.staging.stage_add("a.txt")
        write("a.txt", "x")

        assert repo.staging.stage_add("a.txt") is None
        assert repo.staging.is_empty()

    def test_add_clears_staged_removal(self, repo: Repository, write) -> None:
        write("a.txt", "x")
        repo.add("a.txt")
        repo.commit("add a")
        repo.staging.stage_remove("a.txt")
        write("a.txt", "x")

        repo.staging.stage_add("a.txt")

        assert repo.state.staged_removals == set()
        assert repo.state.staged_additions == {}


class TestStageRemove:
    """Tests for StagingArea.stage_remove."""

    def test_unstage_pending_addition(self, repo: Repository, write, tmp_path) -> None:
        """Test that removing a staged, untracked file keeps it on disk."""
        write("a.txt", "x")
        repo.staging.stage_add("a.txt")

        assert repo.staging.stage_remove("a.txt") == RemovalOutcome.UNSTAGED
        assert repo.staging.is_empty()
        assert (tmp_path / "a.txt").exists()

    def test_remove_tracked_file(self, repo: Repository, write, tmp_path) -> None:
        write("a.txt", "x")
        repo.add("a.txt")
        repo.commit("add a")

        outcome = repo.staging.stage_remove("a.txt")

        assert outcome == RemovalOutcome.STAGED_FOR_REMOVAL
        assert repo.state.staged_removals == {"a.txt"}
        assert not (tmp_path / "a.txt").exists()

    def test_nothing_to_remove(self, repo: Repository, write, tmp_path) -> None:
        """Test that an untracked, unstaged file is left alone."""
        write("a.txt", "x")

        with pytest.raises(NothingToRemoveError):
            repo.staging.stage_remove("a.txt")
        assert (tmp_path / "a.txt").exists()

    def test_never_staged_both_ways(self, repo: Repository, write) -> None:
        write("a.txt", "x")
        repo.add("a.txt")
        repo.commit("add a")
        write("a.txt", "y")
        repo.staging.stage_add("a.txt")

        repo.staging.stage_remove("a.txt")
        write("a.txt", "z")
        repo.staging.stage_add("a.txt")

        state = repo.state
        assert not set(state.staged_additions) & state.staged_removals


def test_clear(repo: Repository, write) -> None:
    write("a.txt", "x")
    repo.staging.stage_add("a.txt")

    repo.staging.clear()

    assert repo.staging.is_empty()
