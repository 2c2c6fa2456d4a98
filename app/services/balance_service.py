"""
Balance resolution.

Opening balance of a day is the previous day's closing balance when one was
persisted; otherwise it is rebuilt from the journal, day by day, starting on
the first of the month.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from app.models.ledger import DayClosing, Expense, WagerKind, WagerTransaction
from app.repositories.interface import LedgerStore
from app.utils.dates import iter_days, month_start, previous_day
from app.utils.ledger_validation import InconsistentState, require_owner

logger = logging.getLogger(__name__)


def compute_net_flow(
    expenses: Iterable[Expense],
    wager_transactions: Iterable[WagerTransaction],
) -> Decimal:
    """ingress - (expenses + egress), exact."""
    wager_transactions = list(wager_transactions)
    ingress = sum(
        (t.amount for t in wager_transactions if t.kind == WagerKind.INGRESS),
        Decimal("0")
    )
    egress = sum(
        (t.amount for t in wager_transactions if t.kind == WagerKind.EGRESS),
        Decimal("0")
    )
    spent = sum((e.amount for e in expenses), Decimal("0"))
    return ingress - (spent + egress)


def check_closing(closing: Optional[DayClosing]) -> Optional[DayClosing]:
    """Reject a closing record that lost its finalized marker."""
    if closing is not None and not closing.is_finalized:
        raise InconsistentState(
            f"Closing balance of {closing.date.isoformat()} is stored "
            "but the day is not marked finalized"
        )
    return closing


class BalanceResolver:
    def __init__(self, store: LedgerStore):
        self.store = store

    async def net_flow_for_day(self, owner_id: Optional[str], day: date) -> Decimal:
        owner_id = require_owner(owner_id)
        expenses = await self.store.list_expenses(owner_id, day)
        wager_transactions = await self.store.list_wager_transactions(owner_id, day)
        return compute_net_flow(expenses, wager_transactions)

    async def resolve_opening_balance(self, owner_id: Optional[str], day: date) -> Decimal:
        """
        Balance carried into a day.

        Uses the cached closing of the day before when it exists, otherwise
        falls back to accumulate_from_month_start.
        """
        owner_id = require_owner(owner_id)
        prior = previous_day(day)
        closing = check_closing(await self.store.get_day_closing(owner_id, prior))
        if closing is not None:
            return closing.closing_balance

        logger.debug(
            "No closing for %s (owner %s); accumulating from month start",
            prior.isoformat(), owner_id
        )
        return await self.accumulate_from_month_start(owner_id, day)

    async def accumulate_from_month_start(self, owner_id: Optional[str], day: date) -> Decimal:
        """
        Sum of daily net flows from the 1st of the month through the day
        before. Zero on the 1st. Cached closings inside the range are not
        consulted.
        """
        owner_id = require_owner(owner_id)
        total = Decimal("0")
        for current in iter_days(month_start(day), previous_day(day)):
            total += await self.net_flow_for_day(owner_id, current)
        return total
