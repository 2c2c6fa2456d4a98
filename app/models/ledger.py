"""
Ledger models - daily journal entries and closing balances.

Design principles:
- Every entry belongs to exactly one owner and one calendar date
- Entry ids are integers numbered per date, independently per entry kind
- Amounts are non-negative Decimals; direction comes from the entry kind
- Expenses are always outflows
- A day is finalized iff a DayClosing exists for (owner, date)
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from app.models.base import LedgerModel, _utcnow
from app.utils.ledger_validation import validate_amount


class WagerKind(str, Enum):
    INGRESS = "ingress"
    EGRESS = "egress"


class Expense(LedgerModel):
    id: int
    owner_id: str
    date: dt.date
    category: str
    subcategory: Optional[str] = None
    amount: Decimal
    description: str = ""

    @field_validator("amount")
    @classmethod
    def _check_amount(cls, value: Decimal) -> Decimal:
        return validate_amount(value)


class WagerTransaction(LedgerModel):
    """A quiniela transaction; the game name doubles as category and source."""
    id: int
    owner_id: str
    date: dt.date
    kind: WagerKind
    category: str
    source: str
    amount: Decimal
    description: str = ""

    @field_validator("amount")
    @classmethod
    def _check_amount(cls, value: Decimal) -> Decimal:
        return validate_amount(value)


class DayClosing(LedgerModel):
    """
    Closing balance of a finalized day.

    Value and finalized marker live in the same record so they are written
    together; finalized_at is None only in records left behind by a broken
    writer.
    """
    owner_id: str
    date: dt.date
    closing_balance: Decimal
    finalized_at: Optional[dt.datetime] = Field(default_factory=_utcnow)

    @property
    def is_finalized(self) -> bool:
        return self.finalized_at is not None


class DaySnapshot(LedgerModel):
    """Everything the presentation layer needs to render one day."""
    date: dt.date
    expenses: List[Expense] = []
    wager_transactions: List[WagerTransaction] = []
    opening_balance: Decimal = Decimal("0")
    is_finalized: bool = False
