import datetime as dt
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict

from app.models.ledger import WagerKind


class ExpenseCreate(BaseModel):
    """Request body to record an expense."""
    category: str = Field(..., min_length=1, max_length=100)
    subcategory: Optional[str] = Field(None, max_length=100)
    amount: Decimal = Field(..., ge=0, allow_inf_nan=False)
    description: str = Field("", max_length=500)


class ExpenseUpdate(BaseModel):
    """Partial update of an expense; only sent fields change."""
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    subcategory: Optional[str] = Field(None, max_length=100)
    amount: Optional[Decimal] = Field(None, ge=0, allow_inf_nan=False)
    description: Optional[str] = Field(None, max_length=500)


class WagerTransactionCreate(BaseModel):
    """
    Request body to record a quiniela transaction.

    category is the game played; source defaults to it.
    """
    kind: WagerKind
    category: str = Field(..., min_length=1, max_length=100)
    source: Optional[str] = Field(None, min_length=1, max_length=100)
    amount: Decimal = Field(..., ge=0, allow_inf_nan=False)
    description: str = Field("", max_length=500)


class WagerTransactionUpdate(BaseModel):
    kind: Optional[WagerKind] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    source: Optional[str] = Field(None, min_length=1, max_length=100)
    amount: Optional[Decimal] = Field(None, ge=0, allow_inf_nan=False)
    description: Optional[str] = Field(None, max_length=500)


class OpeningBalanceResponse(BaseModel):
    date: dt.date
    opening_balance: Decimal


class FinalizeDayResponse(BaseModel):
    """Response after finalizing a day."""
    date: dt.date
    finalized: bool = True
    closing_balance: Decimal
    finalized_at: dt.datetime

    model_config = ConfigDict(populate_by_name=True)


class FinalizedDaysResponse(BaseModel):
    dates: List[dt.date]
