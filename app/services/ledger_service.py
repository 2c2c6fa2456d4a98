from datetime import date
from decimal import Decimal
from typing import List, Optional

from app.models.ledger import DayClosing, DaySnapshot, Expense, WagerTransaction
from app.repositories.interface import LedgerStore
from app.schemas.ledger import (
    ExpenseCreate,
    ExpenseUpdate,
    WagerTransactionCreate,
    WagerTransactionUpdate,
)
from app.services.balance_service import BalanceResolver, check_closing
from app.services.finalization_service import DayFinalizationService
from app.services.journal_service import JournalService
from app.services.snapshot_service import DaySnapshotService
from app.utils.locks import KeyedLocks


class LedgerService:
    """
    Entry point for the daily ledger.

    Wires journal, balance resolver, finalization and snapshot services
    around one store and one set of (owner, date) locks. Every operation
    takes the owner explicitly and raises Unauthenticated when it is None.
    """

    def __init__(self, store: LedgerStore):
        self.store = store
        self.locks = KeyedLocks()
        self.journal = JournalService(store, self.locks)
        self.resolver = BalanceResolver(store)
        self.finalization = DayFinalizationService(store, self.resolver, self.locks)
        self.snapshots = DaySnapshotService(store, self.resolver)

    # ----- expenses -----

    async def append_expense(self, owner_id: Optional[str], day: date, data: ExpenseCreate) -> Expense:
        return await self.journal.append_expense(owner_id, day, data)

    async def list_expenses(self, owner_id: Optional[str], day: date) -> List[Expense]:
        return await self.journal.list_expenses(owner_id, day)

    async def update_expense(
        self, owner_id: Optional[str], day: date, expense_id: int, update: ExpenseUpdate
    ) -> Expense:
        return await self.journal.update_expense(owner_id, day, expense_id, update)

    async def remove_expense(self, owner_id: Optional[str], day: date, expense_id: int) -> None:
        await self.journal.remove_expense(owner_id, day, expense_id)

    # ----- wager transactions -----

    async def append_wager_transaction(
        self, owner_id: Optional[str], day: date, data: WagerTransactionCreate
    ) -> WagerTransaction:
        return await self.journal.append_wager_transaction(owner_id, day, data)

    async def list_wager_transactions(self, owner_id: Optional[str], day: date) -> List[WagerTransaction]:
        return await self.journal.list_wager_transactions(owner_id, day)

    async def update_wager_transaction(
        self, owner_id: Optional[str], day: date, transaction_id: int, update: WagerTransactionUpdate
    ) -> WagerTransaction:
        return await self.journal.update_wager_transaction(owner_id, day, transaction_id, update)

    async def remove_wager_transaction(self, owner_id: Optional[str], day: date, transaction_id: int) -> None:
        await self.journal.remove_wager_transaction(owner_id, day, transaction_id)

    # ----- balances and days -----

    async def resolve_opening_balance(self, owner_id: Optional[str], day: date) -> Decimal:
        return await self.resolver.resolve_opening_balance(owner_id, day)

    async def finalize_day(self, owner_id: Optional[str], day: date) -> DayClosing:
        return await self.finalization.finalize_day(owner_id, day)

    async def get_day_snapshot(self, owner_id: Optional[str], day: date) -> DaySnapshot:
        return await self.snapshots.get_day_snapshot(owner_id, day)

    async def list_finalized_dates(self, owner_id: Optional[str]) -> List[date]:
        return await self.snapshots.list_finalized_dates(owner_id)

    async def is_finalized(self, owner_id: str, day: date) -> bool:
        closing = check_closing(await self.store.get_day_closing(owner_id, day))
        return closing is not None
