"""
Day finalization - Open -> Finalized, one way.

Process:
1. Read the day's expenses and wager transactions
2. Resolve the opening balance
3. closing = opening + net flow
4. Store closing balance and finalized marker in one write

Finalizing again recomputes from the journal and overwrites the closing.
"""

import logging
from datetime import date
from typing import Optional

from app.models.ledger import DayClosing
from app.repositories.interface import LedgerStore
from app.services.balance_service import BalanceResolver, compute_net_flow
from app.utils.ledger_validation import require_owner
from app.utils.locks import KeyedLocks

logger = logging.getLogger(__name__)


class DayFinalizationService:
    def __init__(self, store: LedgerStore, resolver: BalanceResolver, locks: KeyedLocks):
        self.store = store
        self.resolver = resolver
        self.locks = locks

    async def finalize_day(self, owner_id: Optional[str], day: date) -> DayClosing:
        owner_id = require_owner(owner_id)
        async with self.locks.hold((owner_id, day)):
            expenses = await self.store.list_expenses(owner_id, day)
            wager_transactions = await self.store.list_wager_transactions(owner_id, day)
            opening = await self.resolver.resolve_opening_balance(owner_id, day)

            closing_balance = opening + compute_net_flow(expenses, wager_transactions)
            closing = await self.store.save_day_closing(
                DayClosing(owner_id=owner_id, date=day, closing_balance=closing_balance)
            )

        logger.info(
            "Finalized %s for owner %s: opening %s, closing %s",
            day.isoformat(), owner_id, opening, closing_balance
        )
        return closing
