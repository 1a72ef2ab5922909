"""
Error hierarchy for the version control core.

Every failure an operation can report is a SproutError subclass grouped under
one of four kinds. The message of each error is what the command line shows
to the user.
"""

from typing import Iterable, List


class SproutError(Exception):
    """Base exception for version control errors."""

    pass


class ValidationError(SproutError):
    """Input to an operation is malformed."""

    pass


class NotFoundError(SproutError):
    """A branch, commit, file or object does not exist."""

    pass


class ConflictError(SproutError):
    """Working-tree or repository state blocks the operation."""

    pass


class StateError(SproutError):
    """The operation makes no sense in the current repository state."""

    pass


class EmptyMessageError(ValidationError):
    def __init__(self) -> None:
        super().__init__("Please enter a commit message.")


class AmbiguousIdError(ValidationError):
    def __init__(self, prefix: str, matches: Iterable[str]):
        self.prefix = prefix
        self.matches: List[str] = sorted(matches)
        super().__init__(
            f"Abbreviated id {prefix} is ambiguous: "
            + ", ".join(m[:12] for m in self.matches)
        )


class NotARepositoryError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("Not in an initialized Sprout directory.")


class FileNotFoundInWorkingTreeError(NotFoundError):
    def __init__(self, filename: str):
        self.filename = filename
        super().__init__("File does not exist.")


class FileNotInCommitError(NotFoundError):
    def __init__(self, filename: str):
        self.filename = filename
        super().__init__("File does not exist in that commit.")


class NoSuchBranchError(NotFoundError):
    def __init__(self, branch: str, message: str = "A branch with that name does not exist."):
        self.branch = branch
        super().__init__(message)


class NoSuchCommitError(NotFoundError):
    def __init__(self, commit_id: str):
        self.commit_id = commit_id
        super().__init__("No commit with that id exists.")


class NoSuchObjectError(NotFoundError):
    def __init__(self, kind: str, object_id: str):
        self.kind = kind
        self.object_id = object_id
        super().__init__(f"No {kind} with id {object_id} exists.")


class NoMatchingCommitError(NotFoundError):
    def __init__(self, message: str):
        self.message = message
        super().__init__("Found no commit with that message.")


class NoCommonAncestorError(NotFoundError):
    def __init__(self, first: str, second: str):
        super().__init__(f"Commits {first[:7]} and {second[:7]} share no history.")


class UntrackedFileConflictError(ConflictError):
    def __init__(self, filenames: Iterable[str]):
        self.filenames: List[str] = sorted(filenames)
        super().__init__(
            "There is an untracked file in the way; "
            "delete it, or add and commit it first."
        )


class UncommittedChangesError(ConflictError):
    def __init__(self) -> None:
        super().__init__("You have uncommitted changes.")


class RepositoryLockedError(ConflictError):
    def __init__(self, lock_file: str):
        self.lock_file = lock_file
        super().__init__(
            f"Another sprout process holds {lock_file}; "
            "remove it if no other process is running."
        )


class RepositoryExistsError(StateError):
    def __init__(self) -> None:
        super().__init__(
            "A Sprout version-control system already exists in the current directory."
        )


class NothingToCommitError(StateError):
    def __init__(self) -> None:
        super().__init__("No changes added to the commit.")


class NothingToRemoveError(StateError):
    def __init__(self, filename: str):
        self.filename = filename
        super().__init__("No reason to remove the file.")


class BranchExistsError(StateError):
    def __init__(self, branch: str):
        self.branch = branch
        super().__init__("A branch with that name already exists.")


class AlreadyOnBranchError(StateError):
    def __init__(self, branch: str):
        self.branch = branch
        super().__init__("No need to checkout the current branch.")


class CannotDeleteCurrentBranchError(StateError):
    def __init__(self, branch: str):
        self.branch = branch
        super().__init__("Cannot remove the current branch.")


class SelfMergeError(StateError):
    def __init__(self, branch: str):
        self.branch = branch
        super().__init__("Cannot merge a branch with itself.")
