"""
MongoLedgerRepository - daily ledger persistence on MongoDB.

Collections:
- expenses:            one document per expense, keyed by (date, id)
- wager_transactions:  one document per quiniela transaction, keyed by (date, id)
- day_closings:        one document per finalized (owner_id, date)

Dates are stored as ISO strings and amounts as Decimal128.
"""

import logging
from contextlib import contextmanager
from datetime import date
from typing import List, Optional, Type, TypeVar

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.models.base import from_document, to_bson_value, to_document
from app.models.ledger import DayClosing, Expense, WagerTransaction
from app.repositories.interface import LedgerStore
from app.utils.ledger_validation import InconsistentState, LedgerStorageError

logger = logging.getLogger(__name__)

Entry = TypeVar("Entry", Expense, WagerTransaction)


@contextmanager
def _storage_errors(operation: str):
    """Re-raise driver errors as LedgerStorageError."""
    try:
        yield
    except DuplicateKeyError as exc:
        logger.warning("Id collision during %s: %s", operation, exc)
        raise LedgerStorageError(f"Concurrent write conflict during {operation}") from exc
    except PyMongoError as exc:
        logger.error("Storage failure during %s: %s", operation, exc)
        raise LedgerStorageError(f"Storage failure during {operation}") from exc


class MongoLedgerRepository(LedgerStore):
    """LedgerStore backed by motor collections."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.expenses = db["expenses"]
        self.wager_transactions = db["wager_transactions"]
        self.day_closings = db["day_closings"]

    async def create_indexes(self) -> None:
        """Create the indexes the ledger relies on."""
        with _storage_errors("create_indexes"):
            for collection in (self.expenses, self.wager_transactions):
                await collection.create_index([("date", 1), ("id", 1)], unique=True)
                await collection.create_index([("owner_id", 1), ("date", 1)])
            await self.day_closings.create_index(
                [("owner_id", 1), ("date", 1)], unique=True
            )

    # ===== GENERIC ENTRY HELPERS =====

    async def _insert(
        self,
        collection: AsyncIOMotorCollection,
        model: Type[Entry],
        owner_id: str,
        day: date,
        fields: dict,
    ) -> Entry:
        """
        Insert with id = max id for the date + 1.

        The journal serializes appends per (collection, date) inside one
        process. Across processes the unique (date, id) index turns a lost
        race into DuplicateKeyError, surfaced as LedgerStorageError so the
        caller can retry.
        """
        with _storage_errors(f"insert into {collection.name}"):
            last = await collection.find_one(
                {"date": day.isoformat()},
                sort=[("id", -1)],
                projection={"id": 1}
            )
            new_id = (last["id"] if last else 0) + 1
            entry = model(**{**fields, "id": new_id, "owner_id": owner_id, "date": day})
            await collection.insert_one(to_document(entry))
        return entry

    async def _list(
        self, collection: AsyncIOMotorCollection, model: Type[Entry], owner_id: str, day: date
    ) -> List[Entry]:
        with _storage_errors(f"list {collection.name}"):
            docs = await collection.find({
                "owner_id": owner_id,
                "date": day.isoformat()
            }).sort("id", 1).to_list(None)
        return [model(**from_document(doc)) for doc in docs]

    async def _update(
        self,
        collection: AsyncIOMotorCollection,
        model: Type[Entry],
        owner_id: str,
        day: date,
        entry_id: int,
        changes: dict,
    ) -> Optional[Entry]:
        if not changes:
            with _storage_errors(f"read {collection.name}"):
                doc = await collection.find_one({
                    "owner_id": owner_id,
                    "date": day.isoformat(),
                    "id": entry_id
                })
        else:
            with _storage_errors(f"update {collection.name}"):
                doc = await collection.find_one_and_update(
                    {
                        "owner_id": owner_id,
                        "date": day.isoformat(),
                        "id": entry_id
                    },
                    {"$set": to_bson_value(changes)},
                    return_document=True
                )
        if not doc:
            return None
        return model(**from_document(doc))

    async def _delete(
        self, collection: AsyncIOMotorCollection, owner_id: str, day: date, entry_id: int
    ) -> bool:
        with _storage_errors(f"delete from {collection.name}"):
            result = await collection.delete_one({
                "owner_id": owner_id,
                "date": day.isoformat(),
                "id": entry_id
            })
        return result.deleted_count > 0

    # ===== EXPENSES =====

    async def insert_expense(self, owner_id: str, day: date, fields: dict) -> Expense:
        return await self._insert(self.expenses, Expense, owner_id, day, fields)

    async def list_expenses(self, owner_id: str, day: date) -> List[Expense]:
        return await self._list(self.expenses, Expense, owner_id, day)

    async def update_expense(
        self, owner_id: str, day: date, expense_id: int, changes: dict
    ) -> Optional[Expense]:
        return await self._update(self.expenses, Expense, owner_id, day, expense_id, changes)

    async def delete_expense(self, owner_id: str, day: date, expense_id: int) -> bool:
        return await self._delete(self.expenses, owner_id, day, expense_id)

    # ===== WAGER TRANSACTIONS =====

    async def insert_wager_transaction(
        self, owner_id: str, day: date, fields: dict
    ) -> WagerTransaction:
        return await self._insert(
            self.wager_transactions, WagerTransaction, owner_id, day, fields
        )

    async def list_wager_transactions(self, owner_id: str, day: date) -> List[WagerTransaction]:
        return await self._list(self.wager_transactions, WagerTransaction, owner_id, day)

    async def update_wager_transaction(
        self, owner_id: str, day: date, transaction_id: int, changes: dict
    ) -> Optional[WagerTransaction]:
        return await self._update(
            self.wager_transactions, WagerTransaction, owner_id, day, transaction_id, changes
        )

    async def delete_wager_transaction(
        self, owner_id: str, day: date, transaction_id: int
    ) -> bool:
        return await self._delete(self.wager_transactions, owner_id, day, transaction_id)

    # ===== DAY CLOSINGS =====

    async def get_day_closing(self, owner_id: str, day: date) -> Optional[DayClosing]:
        with _storage_errors("read day_closings"):
            doc = await self.day_closings.find_one({
                "owner_id": owner_id,
                "date": day.isoformat()
            })
        if not doc:
            return None
        return DayClosing(**from_document(doc))

    async def save_day_closing(self, closing: DayClosing) -> DayClosing:
        """Upsert value and finalized marker together."""
        with _storage_errors("save day_closings"):
            result = await self.day_closings.update_one(
                {
                    "owner_id": closing.owner_id,
                    "date": closing.date.isoformat()
                },
                {"$set": to_document(closing)},
                upsert=True
            )
        if not result.acknowledged:
            raise InconsistentState(
                f"Closing of {closing.date.isoformat()} was not acknowledged by storage"
            )
        return closing

    async def list_day_closings(self, owner_id: str) -> List[DayClosing]:
        with _storage_errors("list day_closings"):
            docs = await self.day_closings.find(
                {"owner_id": owner_id}
            ).sort("date", 1).to_list(None)
        return [DayClosing(**from_document(doc)) for doc in docs]
