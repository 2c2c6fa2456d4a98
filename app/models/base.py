from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

from bson.decimal128 import Decimal128
from pydantic import BaseModel, ConfigDict


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerModel(BaseModel):
    """Common config for records stored by the ledger."""

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True
    )


def to_bson_value(value: Any) -> Any:
    """
    Convert a python value to something BSON can store.

    MongoDB has no calendar-date or arbitrary-precision decimal type that
    round-trips from python, so dates become ISO strings and Decimals become
    Decimal128.
    """
    if isinstance(value, Decimal):
        return Decimal128(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_bson_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_bson_value(v) for v in value]
    return value


def from_bson_value(value: Any) -> Any:
    if isinstance(value, Decimal128):
        return value.to_decimal()
    if isinstance(value, dict):
        return {k: from_bson_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_bson_value(v) for v in value]
    return value


def to_document(model: BaseModel) -> dict:
    """Dump a model to a MongoDB document."""
    return to_bson_value(model.model_dump(mode="python"))


def from_document(doc: dict) -> dict:
    """Strip Mongo's _id and convert BSON values back for model validation."""
    data = {k: v for k, v in doc.items() if k != "_id"}
    return from_bson_value(data)
