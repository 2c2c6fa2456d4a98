"""
Process-wide ledger service.

Built once at startup from settings.LEDGER_BACKEND and handed to routes
through get_ledger_service; tests override that dependency.
"""

import logging
from typing import Optional

from app.core.config import settings
from app.db.mongo import connect_to_mongo, close_mongo_connection
from app.repositories.ledger_repo import MongoLedgerRepository
from app.repositories.memory_repo import InMemoryLedgerStore
from app.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)

_ledger_service: Optional[LedgerService] = None


async def init_ledger_service() -> LedgerService:
    """Create the store for the configured backend and wrap it."""
    global _ledger_service

    if settings.LEDGER_BACKEND == "memory":
        store = InMemoryLedgerStore()
    elif settings.LEDGER_BACKEND == "mongo":
        db = await connect_to_mongo()
        store = MongoLedgerRepository(db)
        await store.create_indexes()
    else:
        raise ValueError(f"Unknown LEDGER_BACKEND: {settings.LEDGER_BACKEND!r}")

    _ledger_service = LedgerService(store)
    logger.info("Ledger ready on %s backend", settings.LEDGER_BACKEND)
    return _ledger_service


async def shutdown_ledger_service():
    global _ledger_service
    _ledger_service = None
    await close_mongo_connection()


def get_ledger_service() -> LedgerService:
    """FastAPI dependency."""
    if _ledger_service is None:
        raise RuntimeError("Ledger service is not initialized")
    return _ledger_service
