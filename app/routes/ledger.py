from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.core.auth import get_current_owner
from app.core.config import settings
from app.db.session import get_ledger_service
from app.models.ledger import DaySnapshot, Expense, WagerTransaction
from app.schemas.ledger import (
    ExpenseCreate,
    ExpenseUpdate,
    FinalizeDayResponse,
    FinalizedDaysResponse,
    OpeningBalanceResponse,
    WagerTransactionCreate,
    WagerTransactionUpdate,
)
from app.services.ledger_service import LedgerService
from app.utils.ledger_validation import (
    DayFinalizedError,
    InconsistentState,
    LedgerError,
    LedgerStorageError,
    NotFound,
    Unauthenticated,
)

router = APIRouter(tags=["ledger"])


def _to_http_error(exc: LedgerError) -> HTTPException:
    """Map ledger errors so callers can tell auth, missing and transient apart."""
    if isinstance(exc, Unauthenticated):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        )
    if isinstance(exc, NotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, DayFinalizedError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, LedgerStorageError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    if isinstance(exc, InconsistentState):
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


async def _ensure_day_open(ledger: LedgerService, owner_id: Optional[str], day: date) -> None:
    """Caller-side lock on finalized days, off unless LOCK_FINALIZED_DAYS is set."""
    if not settings.LOCK_FINALIZED_DAYS or owner_id is None:
        return
    if await ledger.is_finalized(owner_id, day):
        raise DayFinalizedError(f"Day {day.isoformat()} is finalized")


# ===== EXPENSES =====

@router.post(
    "/days/{day}/expenses",
    response_model=Expense,
    status_code=status.HTTP_201_CREATED
)
async def create_expense(
    day: date,
    payload: ExpenseCreate,
    owner_id: Optional[str] = Depends(get_current_owner),
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Record an expense on a day."""
    try:
        await _ensure_day_open(ledger, owner_id, day)
        return await ledger.append_expense(owner_id, day, payload)
    except LedgerError as exc:
        raise _to_http_error(exc)


@router.get("/days/{day}/expenses", response_model=List[Expense])
async def list_expenses(
    day: date,
    owner_id: Optional[str] = Depends(get_current_owner),
    ledger: LedgerService = Depends(get_ledger_service)
):
    try:
        return await ledger.list_expenses(owner_id, day)
    except LedgerError as exc:
        raise _to_http_error(exc)


@router.patch("/days/{day}/expenses/{expense_id}", response_model=Expense)
async def update_expense(
    day: date,
    expense_id: int,
    payload: ExpenseUpdate,
    owner_id: Optional[str] = Depends(get_current_owner),
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Update the sent fields of an expense."""
    try:
        await _ensure_day_open(ledger, owner_id, day)
        return await ledger.update_expense(owner_id, day, expense_id, payload)
    except LedgerError as exc:
        raise _to_http_error(exc)


@router.delete("/days/{day}/expenses/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(
    day: date,
    expense_id: int,
    owner_id: Optional[str] = Depends(get_current_owner),
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Delete an expense. Deleting an unknown id succeeds."""
    try:
        await _ensure_day_open(ledger, owner_id, day)
        await ledger.remove_expense(owner_id, day, expense_id)
    except LedgerError as exc:
        raise _to_http_error(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ===== WAGER TRANSACTIONS =====

@router.post(
    "/days/{day}/wagers",
    response_model=WagerTransaction,
    status_code=status.HTTP_201_CREATED
)
async def create_wager_transaction(
    day: date,
    payload: WagerTransactionCreate,
    owner_id: Optional[str] = Depends(get_current_owner),
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Record a quiniela ingress or egress on a day."""
    try:
        await _ensure_day_open(ledger, owner_id, day)
        return await ledger.append_wager_transaction(owner_id, day, payload)
    except LedgerError as exc:
        raise _to_http_error(exc)


@router.get("/days/{day}/wagers", response_model=List[WagerTransaction])
async def list_wager_transactions(
    day: date,
    owner_id: Optional[str] = Depends(get_current_owner),
    ledger: LedgerService = Depends(get_ledger_service)
):
    try:
        return await ledger.list_wager_transactions(owner_id, day)
    except LedgerError as exc:
        raise _to_http_error(exc)


@router.patch("/days/{day}/wagers/{transaction_id}", response_model=WagerTransaction)
async def update_wager_transaction(
    day: date,
    transaction_id: int,
    payload: WagerTransactionUpdate,
    owner_id: Optional[str] = Depends(get_current_owner),
    ledger: LedgerService = Depends(get_ledger_service)
):
    try:
        await _ensure_day_open(ledger, owner_id, day)
        return await ledger.update_wager_transaction(owner_id, day, transaction_id, payload)
    except LedgerError as exc:
        raise _to_http_error(exc)


@router.delete("/days/{day}/wagers/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_wager_transaction(
    day: date,
    transaction_id: int,
    owner_id: Optional[str] = Depends(get_current_owner),
    ledger: LedgerService = Depends(get_ledger_service)
):
    try:
        await _ensure_day_open(ledger, owner_id, day)
        await ledger.remove_wager_transaction(owner_id, day, transaction_id)
    except LedgerError as exc:
        raise _to_http_error(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ===== DAYS =====

@router.get("/days/{day}/opening-balance", response_model=OpeningBalanceResponse)
async def get_opening_balance(
    day: date,
    owner_id: Optional[str] = Depends(get_current_owner),
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Balance carried into a day."""
    try:
        opening = await ledger.resolve_opening_balance(owner_id, day)
    except LedgerError as exc:
        raise _to_http_error(exc)
    return OpeningBalanceResponse(date=day, opening_balance=opening)


@router.post("/days/{day}/finalize", response_model=FinalizeDayResponse)
async def finalize_day(
    day: date,
    owner_id: Optional[str] = Depends(get_current_owner),
    ledger: LedgerService = Depends(get_ledger_service)
):
    """
    Finalize a day: compute and store its closing balance.

    Finalizing an already finalized day recomputes it from the journal.
    """
    try:
        closing = await ledger.finalize_day(owner_id, day)
    except LedgerError as exc:
        raise _to_http_error(exc)
    return FinalizeDayResponse(
        date=closing.date,
        finalized=closing.is_finalized,
        closing_balance=closing.closing_balance,
        finalized_at=closing.finalized_at
    )


@router.get("/days/{day}", response_model=DaySnapshot)
async def get_day(
    day: date,
    owner_id: Optional[str] = Depends(get_current_owner),
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Entries, opening balance and finalized flag of a day."""
    try:
        return await ledger.get_day_snapshot(owner_id, day)
    except LedgerError as exc:
        raise _to_http_error(exc)


@router.get("/finalized-days", response_model=FinalizedDaysResponse)
async def list_finalized_days(
    owner_id: Optional[str] = Depends(get_current_owner),
    ledger: LedgerService = Depends(get_ledger_service)
):
    try:
        dates = await ledger.list_finalized_dates(owner_id)
    except LedgerError as exc:
        raise _to_http_error(exc)
    return FinalizedDaysResponse(dates=dates)
