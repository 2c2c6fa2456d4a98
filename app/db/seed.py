"""
Demo data for local runs.

Yesterday gets an electricity expense and a quiniela collection, then is
finalized so today opens with a carried-forward balance.
"""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from app.models.ledger import DayClosing, WagerKind
from app.schemas.ledger import ExpenseCreate, WagerTransactionCreate
from app.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)


async def seed_demo_data(
    ledger: LedgerService, owner_id: str, today: Optional[date] = None
) -> Optional[DayClosing]:
    """
    Seed yesterday for owner_id. Does nothing if yesterday already has
    entries, so restarting the app does not duplicate them.
    """
    today = today or date.today()
    yesterday = today - timedelta(days=1)

    if await ledger.list_expenses(owner_id, yesterday) or \
            await ledger.list_wager_transactions(owner_id, yesterday):
        logger.info("Demo data already present for %s", yesterday.isoformat())
        return None

    await ledger.append_expense(owner_id, yesterday, ExpenseCreate(
        category="Servicios",
        subcategory="Luz",
        amount=Decimal("1500"),
        description="Pago de electricidad"
    ))
    await ledger.append_wager_transaction(owner_id, yesterday, WagerTransactionCreate(
        kind=WagerKind.INGRESS,
        category="Primera",
        source="Quiniela Nacional",
        amount=Decimal("5000"),
        description="Recaudación Primera"
    ))
    closing = await ledger.finalize_day(owner_id, yesterday)
    logger.info(
        "Seeded demo data for owner %s on %s (closing %s)",
        owner_id, yesterday.isoformat(), closing.closing_balance
    )
    return closing
