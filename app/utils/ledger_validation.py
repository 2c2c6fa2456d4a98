"""Ledger errors and argument checks."""
from decimal import Decimal
from typing import Optional


class LedgerError(Exception):
    """Base class for ledger errors."""
    pass


class Unauthenticated(LedgerError):
    """No owner context was established for the call."""

    def __init__(self, message: str = "Owner not authenticated"):
        super().__init__(message)


class NotFound(LedgerError):
    """Entry id does not exist for the owner and date."""
    pass


class InconsistentState(LedgerError):
    """Closing balance and finalized marker disagree after a write."""
    pass


class LedgerStorageError(LedgerError):
    """
    Transient storage failure.

    Unlike the other ledger errors, the caller may retry the operation.
    """
    pass


class DayFinalizedError(LedgerError):
    """Journal edit rejected because the day is finalized."""
    pass


def require_owner(owner_id: Optional[str]) -> str:
    """Return the owner id, or raise Unauthenticated when there is none."""
    if owner_id is None or not str(owner_id).strip():
        raise Unauthenticated()
    return str(owner_id)


def validate_amount(amount: Decimal) -> Decimal:
    """Amounts are magnitudes; direction comes from the entry kind."""
    if amount.is_nan() or amount.is_infinite():
        raise ValueError(f"Amount must be a finite number: {amount}")
    if amount < 0:
        raise ValueError(f"Amount must be non-negative: {amount}")
    return amount
