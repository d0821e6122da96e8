"""Conversions between BSON values and JSON-friendly Python values."""

from datetime import datetime
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId


def coerce_object_id(value: Any) -> Optional[ObjectId]:
    """Return `value` as an `ObjectId`, or `None` when it is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def serialize_document(value: Any) -> Any:
    """Recursively turn ObjectIds into strings and datetimes into ISO-8601 strings."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: serialize_document(item) for key, item in value.items()}
    if isinstance(value, list):
        return [serialize_document(item) for item in value]
    return value
