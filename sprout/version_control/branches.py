"""
Branch pointers and the active branch.
"""

from typing import List

from sprout.logging import get_sprout_logger

from .checkout import CheckoutEngine
from .context import RepositoryContext
from .errors import (
    AlreadyOnBranchError,
    BranchExistsError,
    CannotDeleteCurrentBranchError,
    NoSuchBranchError,
)
from .objects import Commit

log = get_sprout_logger("branches")


class BranchManager:
    """Creates, deletes and switches branches; HEAD follows the current branch."""

    def __init__(self, ctx: RepositoryContext, checkout: CheckoutEngine):
        self.ctx = ctx
        self.checkout = checkout

    @property
    def current(self) -> str:
        return self.ctx.state.current_branch

    def list_branches(self) -> List[str]:
        """List all branches in sorted order."""
        return self.ctx.state.branch_names()

    def exists(self, name: str) -> bool:
        return name in self.ctx.state.branches

    def tip(self, name: str) -> str:
        """
        Commit id a branch points to.

        Raises:
            NoSuchBranchError: If the branch does not exist
        """
        try:
            return self.ctx.state.branches[name]
        except KeyError:
            raise NoSuchBranchError(name) from None

    def create_branch(self, name: str) -> str:
        """
        Create a branch at the current HEAD.

        Returns:
            Commit id the new branch points to

        Raises:
            BranchExistsError: If the name is taken
        """
        if self.exists(name):
            raise BranchExistsError(name)

        head = self.ctx.state.head
        self.ctx.state.branches[name] = head
        log.info("Created branch: {branch} at {commit_id:.8}", branch=name, commit_id=head)
        return head

    def delete_branch(self, name: str) -> None:
        """
        Delete a branch pointer. Its commits stay in the store.

        Raises:
            NoSuchBranchError: If the branch does not exist
            CannotDeleteCurrentBranchError: If it is the active branch
        """
        if not self.exists(name):
            raise NoSuchBranchError(name)
        if name == self.current:
            raise CannotDeleteCurrentBranchError(name)

        del self.ctx.state.branches[name]
        log.info("Deleted branch: {branch}", branch=name)

    def switch(self, name: str) -> Commit:
        """
        Check out a branch's tip and make it the active branch.

        Returns:
            The commit now at HEAD

        Raises:
            NoSuchBranchError: If the branch does not exist
            AlreadyOnBranchError: If it is already the active branch
            UntrackedFileConflictError: If untracked files are present
        """
        if not self.exists(name):
            raise NoSuchBranchError(name, "No such branch exists.")
        if name == self.current:
            raise AlreadyOnBranchError(name)

        target = self.ctx.store.get_commit(self.tip(name))
        self.checkout.checkout_all(target)

        state = self.ctx.state
        state.clear_staging()
        state.current_branch = name
        state.head = target.commit_id
        log.info("Switched to branch: {branch}", branch=name, commit_id=target.commit_id)
        return target

    def advance(self, name: str, commit_id: str) -> None:
        """Move a branch pointer; HEAD moves with it when name is current."""
        self.ctx.state.move_branch(name, commit_id)
        log.debug("Moved {branch} to {commit_id:.8}", branch=name, commit_id=commit_id)
