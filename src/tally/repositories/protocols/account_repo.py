"""Account repository protocol."""

from typing import Protocol, Optional

from tally.domain.models import Account, AccountCategory


class AccountRepository(Protocol):
    """Interface for account data access."""

    def create(self, account: Account) -> Account:
        """Persist a new account."""
        ...

    def get_by_id(self, account_id: str) -> Optional[Account]:
        """Retrieve account by ID."""
        ...

    def list_all(
        self,
        is_active: Optional[bool] = None,
        category: Optional[AccountCategory] = None,
    ) -> list[Account]:
        """List accounts, optionally filtered."""
        ...

    def update(self, account: Account) -> Account:
        """Update the mutable fields of an existing account."""
        ...

    def delete(self, account_id: str) -> bool:
        """Delete an account; its entries cascade and milestones unlink."""
        ...
