"""Read-side composition of a day; never writes."""

from datetime import date
from typing import List, Optional

from app.models.ledger import DaySnapshot
from app.repositories.interface import LedgerStore
from app.services.balance_service import BalanceResolver, check_closing
from app.utils.ledger_validation import require_owner


class DaySnapshotService:
    def __init__(self, store: LedgerStore, resolver: BalanceResolver):
        self.store = store
        self.resolver = resolver

    async def get_day_snapshot(self, owner_id: Optional[str], day: date) -> DaySnapshot:
        owner_id = require_owner(owner_id)
        expenses = await self.store.list_expenses(owner_id, day)
        wager_transactions = await self.store.list_wager_transactions(owner_id, day)
        opening_balance = await self.resolver.resolve_opening_balance(owner_id, day)
        closing = check_closing(await self.store.get_day_closing(owner_id, day))

        return DaySnapshot(
            date=day,
            expenses=expenses,
            wager_transactions=wager_transactions,
            opening_balance=opening_balance,
            is_finalized=closing is not None
        )

    async def list_finalized_dates(self, owner_id: Optional[str]) -> List[date]:
        owner_id = require_owner(owner_id)
        closings = await self.store.list_day_closings(owner_id)
        return [check_closing(c).date for c in closings]
