"""Port for reading and writing ledger accounts."""

from decimal import Decimal
from typing import Protocol

from bank_ledger.domain.models import Account, AccountStatus


class AccountStorePort(Protocol):
    """Port exposing account rows keyed by account number.

    Calls are only valid inside an open unit of work scope.
    """

    def get(self, account_number: int) -> Account | None:
        """Return the account, or None when it does not exist."""

    def create(self, account: Account) -> int:
        """Persist a new account and return its store-assigned number."""

    def update_balance(
        self,
        account_number: int,
        new_balance: Decimal,
        expected_prior_balance: Decimal,
    ) -> None:
        """Write a new balance if the stored one still equals the prior.

        Raises:
            ConcurrentModificationError: If the stored balance changed.
        """

    def set_status(
        self,
        account_number: int,
        status: AccountStatus,
        expected_prior_balance: Decimal | None = None,
    ) -> None:
        """Change the account status.

        When ``expected_prior_balance`` is given the write only applies if
        the stored balance still equals it.

        Raises:
            AccountNotFoundError: If the account does not exist.
            ConcurrentModificationError: If the expected balance changed.
        """

    def list_all(self) -> list[Account]:
        """Return every account ordered by account number."""


__all__ = ["AccountStorePort"]
