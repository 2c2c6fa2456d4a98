"""
Storage interface for the daily ledger.

The ledger services depend only on this interface, so the MongoDB repository
can be swapped for the in-memory store in tests and local runs without
touching ledger logic.

Entry lists are physically shared per date across owners; every read and
write below is scoped by owner_id except id assignment, which numbers
entries per date.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from app.models.ledger import DayClosing, Expense, WagerTransaction


class LedgerStore(ABC):
    """Persistence operations the ledger needs."""

    # ----- expenses -----

    @abstractmethod
    async def insert_expense(self, owner_id: str, day: date, fields: dict) -> Expense:
        """
        Store a new expense under its date.

        The id is the highest expense id stored for that date plus one,
        or 1 for an empty date.
        """

    @abstractmethod
    async def list_expenses(self, owner_id: str, day: date) -> List[Expense]:
        """Expenses of one owner for one date, ordered by id."""

    @abstractmethod
    async def update_expense(
        self, owner_id: str, day: date, expense_id: int, changes: dict
    ) -> Optional[Expense]:
        """Merge changes into the stored expense. None if it does not exist."""

    @abstractmethod
    async def delete_expense(self, owner_id: str, day: date, expense_id: int) -> bool:
        """Remove an expense. False if there was nothing to remove."""

    # ----- wager transactions -----

    @abstractmethod
    async def insert_wager_transaction(
        self, owner_id: str, day: date, fields: dict
    ) -> WagerTransaction:
        """Same id rule as insert_expense, numbered independently."""

    @abstractmethod
    async def list_wager_transactions(self, owner_id: str, day: date) -> List[WagerTransaction]:
        pass

    @abstractmethod
    async def update_wager_transaction(
        self, owner_id: str, day: date, transaction_id: int, changes: dict
    ) -> Optional[WagerTransaction]:
        pass

    @abstractmethod
    async def delete_wager_transaction(
        self, owner_id: str, day: date, transaction_id: int
    ) -> bool:
        pass

    # ----- day closings -----

    @abstractmethod
    async def get_day_closing(self, owner_id: str, day: date) -> Optional[DayClosing]:
        """Closing record of a day, if the day was ever finalized."""

    @abstractmethod
    async def save_day_closing(self, closing: DayClosing) -> DayClosing:
        """
        Write closing balance and finalized marker in a single operation,
        overwriting an earlier closing of the same day.

        Raises:
            InconsistentState: if the write was not acknowledged
        """

    @abstractmethod
    async def list_day_closings(self, owner_id: str) -> List[DayClosing]:
        """All closings of an owner, ordered by date."""
