"""In-memory LedgerStore, used by tests and the "memory" backend."""

from datetime import date
from typing import Dict, List, Optional, Tuple, Type, TypeVar

from app.models.ledger import DayClosing, Expense, WagerTransaction
from app.repositories.interface import LedgerStore

Entry = TypeVar("Entry", Expense, WagerTransaction)


class InMemoryLedgerStore(LedgerStore):
    """
    Dict-backed store.

    Keeps one list per date for each entry kind, shared by every owner.
    No await happens between reading the max id and appending, so id
    assignment cannot interleave inside one event loop.
    """

    def __init__(self):
        self.expenses: Dict[date, List[Expense]] = {}
        self.wager_transactions: Dict[date, List[WagerTransaction]] = {}
        self.day_closings: Dict[Tuple[str, date], DayClosing] = {}

    # ----- generic helpers -----

    @staticmethod
    def _insert(
        table: Dict[date, List[Entry]], model: Type[Entry], owner_id: str, day: date, fields: dict
    ) -> Entry:
        entries = table.setdefault(day, [])
        new_id = max((e.id for e in entries), default=0) + 1
        entry = model(**{**fields, "id": new_id, "owner_id": owner_id, "date": day})
        entries.append(entry)
        return entry.model_copy()

    @staticmethod
    def _list(table: Dict[date, List[Entry]], owner_id: str, day: date) -> List[Entry]:
        entries = [e for e in table.get(day, []) if e.owner_id == owner_id]
        return [e.model_copy() for e in sorted(entries, key=lambda e: e.id)]

    @staticmethod
    def _update(
        table: Dict[date, List[Entry]], owner_id: str, day: date, entry_id: int, changes: dict
    ) -> Optional[Entry]:
        entries = table.get(day, [])
        for index, entry in enumerate(entries):
            if entry.id == entry_id and entry.owner_id == owner_id:
                merged = type(entry)(**{**entry.model_dump(), **changes})
                entries[index] = merged
                return merged.model_copy()
        return None

    @staticmethod
    def _delete(table: Dict[date, List[Entry]], owner_id: str, day: date, entry_id: int) -> bool:
        entries = table.get(day, [])
        kept = [e for e in entries if not (e.id == entry_id and e.owner_id == owner_id)]
        if len(kept) == len(entries):
            return False
        table[day] = kept
        return True

    # ----- expenses -----

    async def insert_expense(self, owner_id: str, day: date, fields: dict) -> Expense:
        return self._insert(self.expenses, Expense, owner_id, day, fields)

    async def list_expenses(self, owner_id: str, day: date) -> List[Expense]:
        return self._list(self.expenses, owner_id, day)

    async def update_expense(
        self, owner_id: str, day: date, expense_id: int, changes: dict
    ) -> Optional[Expense]:
        return self._update(self.expenses, owner_id, day, expense_id, changes)

    async def delete_expense(self, owner_id: str, day: date, expense_id: int) -> bool:
        return self._delete(self.expenses, owner_id, day, expense_id)

    # ----- wager transactions -----

    async def insert_wager_transaction(
        self, owner_id: str, day: date, fields: dict
    ) -> WagerTransaction:
        return self._insert(self.wager_transactions, WagerTransaction, owner_id, day, fields)

    async def list_wager_transactions(self, owner_id: str, day: date) -> List[WagerTransaction]:
        return self._list(self.wager_transactions, owner_id, day)

    async def update_wager_transaction(
        self, owner_id: str, day: date, transaction_id: int, changes: dict
    ) -> Optional[WagerTransaction]:
        return self._update(self.wager_transactions, owner_id, day, transaction_id, changes)

    async def delete_wager_transaction(
        self, owner_id: str, day: date, transaction_id: int
    ) -> bool:
        return self._delete(self.wager_transactions, owner_id, day, transaction_id)

    # ----- day closings -----

    async def get_day_closing(self, owner_id: str, day: date) -> Optional[DayClosing]:
        closing = self.day_closings.get((owner_id, day))
        return closing.model_copy() if closing else None

    async def save_day_closing(self, closing: DayClosing) -> DayClosing:
        self.day_closings[(closing.owner_id, closing.date)] = closing.model_copy()
        return closing

    async def list_day_closings(self, owner_id: str) -> List[DayClosing]:
        closings = [c for (owner, _), c in self.day_closings.items() if owner == owner_id]
        return [c.model_copy() for c in sorted(closings, key=lambda c: c.date)]
