"""
Entry journal - expenses and quiniela transactions per owner and date.

Writes for one (owner, date) are serialized. Appends also hold the lock of
the date's id sequence, which every owner shares. Edits on a finalized day are
accepted and logged; the stored closing balance is left as it was until the
day is finalized again. Rejecting such edits is up to the caller.
"""

import logging
from datetime import date
from typing import List, Optional

from app.models.ledger import Expense, WagerTransaction
from app.repositories.interface import LedgerStore
from app.schemas.ledger import (
    ExpenseCreate,
    ExpenseUpdate,
    WagerTransactionCreate,
    WagerTransactionUpdate,
)
from app.services.balance_service import check_closing
from app.utils.ledger_validation import NotFound, require_owner
from app.utils.locks import KeyedLocks

logger = logging.getLogger(__name__)

# Fields that may be cleared by sending null
NULLABLE_FIELDS = {"subcategory"}


def _id_sequence(kind: str, day: date) -> tuple:
    """Lock key for the id sequence of one entry kind on one date, shared by all owners."""
    return ("id-sequence", kind, day)


def _changes(update) -> dict:
    return {
        key: value
        for key, value in update.model_dump(exclude_unset=True).items()
        if value is not None or key in NULLABLE_FIELDS
    }


class JournalService:
    def __init__(self, store: LedgerStore, locks: KeyedLocks):
        self.store = store
        self.locks = locks

    async def _warn_if_finalized(self, owner_id: str, day: date, action: str) -> None:
        if check_closing(await self.store.get_day_closing(owner_id, day)) is not None:
            logger.warning(
                "%s on finalized day %s (owner %s); stored closing balance is now stale",
                action, day.isoformat(), owner_id
            )

    # ===== EXPENSES =====

    async def append_expense(
        self, owner_id: Optional[str], day: date, data: ExpenseCreate
    ) -> Expense:
        owner_id = require_owner(owner_id)
        async with self.locks.hold((owner_id, day)):
            await self._warn_if_finalized(owner_id, day, "Expense added")
            async with self.locks.hold(_id_sequence("expenses", day)):
                expense = await self.store.insert_expense(owner_id, day, data.model_dump())
        logger.info("Expense %s recorded for %s (owner %s)", expense.id, day.isoformat(), owner_id)
        return expense

    async def list_expenses(self, owner_id: Optional[str], day: date) -> List[Expense]:
        owner_id = require_owner(owner_id)
        return await self.store.list_expenses(owner_id, day)

    async def update_expense(
        self, owner_id: Optional[str], day: date, expense_id: int, update: ExpenseUpdate
    ) -> Expense:
        owner_id = require_owner(owner_id)
        async with self.locks.hold((owner_id, day)):
            await self._warn_if_finalized(owner_id, day, "Expense edited")
            expense = await self.store.update_expense(owner_id, day, expense_id, _changes(update))
        if expense is None:
            raise NotFound(f"Expense {expense_id} not found on {day.isoformat()}")
        return expense

    async def remove_expense(self, owner_id: Optional[str], day: date, expense_id: int) -> None:
        """Removing an unknown id is a no-op."""
        owner_id = require_owner(owner_id)
        async with self.locks.hold((owner_id, day)):
            await self._warn_if_finalized(owner_id, day, "Expense removed")
            removed = await self.store.delete_expense(owner_id, day, expense_id)
        if not removed:
            logger.debug("Expense %s not present on %s; nothing removed", expense_id, day.isoformat())

    # ===== WAGER TRANSACTIONS =====

    async def append_wager_transaction(
        self, owner_id: Optional[str], day: date, data: WagerTransactionCreate
    ) -> WagerTransaction:
        owner_id = require_owner(owner_id)
        fields = data.model_dump()
        if not fields.get("source"):
            fields["source"] = fields["category"]
        async with self.locks.hold((owner_id, day)):
            await self._warn_if_finalized(owner_id, day, "Wager transaction added")
            async with self.locks.hold(_id_sequence("wager_transactions", day)):
                transaction = await self.store.insert_wager_transaction(owner_id, day, fields)
        logger.info(
            "Wager transaction %s (%s) recorded for %s (owner %s)",
            transaction.id, transaction.kind.value, day.isoformat(), owner_id
        )
        return transaction

    async def list_wager_transactions(
        self, owner_id: Optional[str], day: date
    ) -> List[WagerTransaction]:
        owner_id = require_owner(owner_id)
        return await self.store.list_wager_transactions(owner_id, day)

    async def update_wager_transaction(
        self,
        owner_id: Optional[str],
        day: date,
        transaction_id: int,
        update: WagerTransactionUpdate,
    ) -> WagerTransaction:
        owner_id = require_owner(owner_id)
        async with self.locks.hold((owner_id, day)):
            await self._warn_if_finalized(owner_id, day, "Wager transaction edited")
            transaction = await self.store.update_wager_transaction(
                owner_id, day, transaction_id, _changes(update)
            )
        if transaction is None:
            raise NotFound(f"Wager transaction {transaction_id} not found on {day.isoformat()}")
        return transaction

    async def remove_wager_transaction(
        self, owner_id: Optional[str], day: date, transaction_id: int
    ) -> None:
        owner_id = require_owner(owner_id)
        async with self.locks.hold((owner_id, day)):
            await self._warn_if_finalized(owner_id, day, "Wager transaction removed")
            await self.store.delete_wager_transaction(owner_id, day, transaction_id)
