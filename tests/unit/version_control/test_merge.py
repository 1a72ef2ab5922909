"""
Unit tests for the merge engine.

Covers per-file classification, conflict file content, and full merges
between branches.
"""

from pathlib import Path

import pytest

from sprout.version_control import (
    MergeAction,
    MergeOutcome,
    Repository,
    build_conflict_content,
    classify,
    compute_commit_id,
)
from sprout.version_control.errors import (
    NoSuchBranchError,
    SelfMergeError,
    UncommittedChangesError,
    UntrackedFileConflictError,
)


class TestClassify:
    """Tests for classify."""

    @pytest.mark.parametrize(
        "split, this, that, expected",
        [
            # modified on both sides, differently
            ({"f": "s"}, {"f": "a"}, {"f": "b"}, MergeAction.CONFLICT),
            # modified here, deleted there
            ({"f": "s"}, {"f": "a"}, {}, MergeAction.CONFLICT),
            # deleted here, modified there
            ({"f": "s"}, {}, {"f": "b"}, MergeAction.CONFLICT),
            # added on both sides with different content
            ({}, {"f": "a"}, {"f": "b"}, MergeAction.CONFLICT),
            # unchanged here, deleted there
            ({"f": "s"}, {"f": "s"}, {}, MergeAction.REMOVE),
            # added only there
            ({}, {}, {"f": "b"}, MergeAction.TAKE_THEIRS),
            # unchanged here, modified there
            ({"f": "s"}, {"f": "s"}, {"f": "b"}, MergeAction.TAKE_THEIRS),
            # modified here only
            ({"f": "s"}, {"f": "a"}, {"f": "s"}, MergeAction.KEEP),
            # added here only
            ({}, {"f": "a"}, {}, MergeAction.KEEP),
            # deleted here, unchanged there
            ({"f": "s"}, {}, {"f": "s"}, MergeAction.KEEP),
            # both sides made the same change
            ({"f": "s"}, {"f": "a"}, {"f": "a"}, MergeAction.KEEP),
            # both sides deleted
            ({"f": "s"}, {}, {}, MergeAction.KEEP),
            # both sides added identical content
            ({}, {"f": "a"}, {"f": "a"}, MergeAction.KEEP),
        ],
    )
    def test_classify(self, split, this, that, expected) -> None:
        assert classify("f", split, this, that) == expected


class TestConflictContent:
    """Tests for build_conflict_content."""

    def test_both_sides(self) -> None:
        assert (
            build_conflict_content(b"y", b"z")
            == b"<<<<<<< HEAD\ny\n=======\nz\n>>>>>>>"
        )

    def test_missing_side(self) -> None:
        assert build_conflict_content(b"y", None) == b"<<<<<<< HEAD\ny\n=======\n>>>>>>>"
        assert build_conflict_content(None, b"z") == b"<<<<<<< HEAD\n=======\nz\n>>>>>>>"

    def test_neither_side(self) -> None:
        assert build_conflict_content(None, None) == b"<<<<<<< HEAD\n=======\n>>>>>>>"


@pytest.fixture
def diverged(repo: Repository, write):
    """
    master and feature both changed a.txt after forking at 'first'.

    master: a.txt = y, feature: a.txt = z.
    """
    write("a.txt", "x")
    repo.add("a.txt")
    repo.commit("first")
    repo.branch("feature")

    write("a.txt", "y")
    repo.add("a.txt")
    repo.commit("master change")

    repo.checkout_branch("feature")
    write("a.txt", "z")
    repo.add("a.txt")
    repo.commit("feature change")

    repo.checkout_branch("master")
    return repo


class TestMerge:
    """Tests for merging branches."""

    def test_conflicting_merge(self, diverged: Repository, read) -> None:
        master_tip = diverged.state.head
        feature_tip = diverged.state.branches["feature"]

        result = diverged.merge("feature")

        assert result.outcome == MergeOutcome.MERGED
        assert result.conflicts == ["a.txt"]
        assert read("a.txt") == "<<<<<<< HEAD\ny\n=======\nz\n>>>>>>>"

        commit = result.commit
        assert commit is not None
        assert commit.parents == (master_tip, feature_tip)
        assert commit.message == "Merged feature into master."
        assert diverged.state.head == commit.commit_id

    def test_clean_merge(self, repo: Repository, write, read, tmp_path: Path) -> None:
        """Test that non-overlapping changes combine without conflicts."""
        write("a.txt", "a")
        write("b.txt", "b")
        write("gone.txt", "g")
        for name in ("a.txt", "b.txt", "gone.txt"):
            repo.add(name)
        repo.commit("base")
        repo.branch("feature")

        write("a.txt", "a2")
        repo.add("a.txt")
        repo.commit("master edits a")

        repo.checkout_branch("feature")
        write("b.txt", "b2")
        write("new.txt", "n")
        repo.add("b.txt")
        repo.add("new.txt")
        repo.rm("gone.txt")
        repo.commit("feature edits b, adds new, drops gone")
        repo.checkout_branch("master")

        result = repo.merge("feature")

        assert not result.has_conflicts
        assert read("a.txt") == "a2"
        assert read("b.txt") == "b2"
        assert read("new.txt") == "n"
        assert not (tmp_path / "gone.txt").exists()
        assert sorted(result.commit.files) == ["a.txt", "b.txt", "new.txt"]
        assert repo.staging.is_empty()

    def test_fast_forward(self, repo: Repository, write, read) -> None:
        repo.branch("feature")
        repo.checkout_branch("feature")
        write("a.txt", "x")
        repo.add("a.txt")
        feature_tip = repo.commit("ahead")
        repo.checkout_branch("master")
        commits_before = len(list(repo.global_log()))

        result = repo.merge("feature")

        assert result.outcome == MergeOutcome.FAST_FORWARD
        assert result.summary() == "Current branch fast-forwarded."
        assert result.commit is None
        assert repo.state.head == feature_tip.commit_id
        assert read("a.txt") == "x"
        assert len(list(repo.global_log())) == commits_before

    def test_given_branch_is_ancestor(self, repo: Repository, write) -> None:
        repo.branch("old")
        write("a.txt", "x")
        repo.add("a.txt")
        head = repo.commit("ahead")

        result = repo.merge("old")

        assert result.outcome == MergeOutcome.ALREADY_MERGED
        assert result.summary() == "Given branch is an ancestor of the current branch."
        assert repo.state.head == head.commit_id

    def test_merge_commit_id_covers_second_parent(self, diverged: Repository) -> None:
        """Test that a merge commit's id covers its second parent."""
        feature_tip = diverged.state.branches["feature"]
        commit = diverged.merge("feature").commit
        stored = diverged.ctx.store.get_commit(commit.commit_id)

        assert stored.second_parent_id == feature_tip
        assert commit.commit_id == compute_commit_id(
            commit.message, commit.parent_id, commit.timestamp, commit.files, feature_tip
        )
        assert commit.commit_id != compute_commit_id(
            commit.message, commit.parent_id, commit.timestamp, commit.files
        )


class TestMergePreconditions:
    """Tests for the checks that run before a merge touches anything."""

    def test_untracked_file(self, diverged: Repository, write, read) -> None:
        write("stray.txt", "mine")

        with pytest.raises(UntrackedFileConflictError):
            diverged.merge("feature")
        assert read("a.txt") == "y"

    def test_uncommitted_changes(self, diverged: Repository, write) -> None:
        write("a.txt", "dirty")
        diverged.add("a.txt")

        with pytest.raises(UncommittedChangesError):
            diverged.merge("feature")

    def test_missing_branch(self, repo: Repository) -> None:
        with pytest.raises(NoSuchBranchError):
            repo.merge("nowhere")

    def test_self_merge(self, repo: Repository) -> None:
        with pytest.raises(SelfMergeError):
            repo.merge("master")
