# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Small helpers shared by repositories and services."""
from datetime import datetime, timezone
from typing import Union

from bson import ObjectId
from bson.errors import InvalidId

from taskhub.core.errors import InvalidObjectIdError

MongoId = Union[ObjectId, str]


def ensure_object_id(data: MongoId) -> ObjectId:
    if isinstance(data, ObjectId):
        return data
    if not isinstance(data, str):
        raise InvalidObjectIdError(data)
    try:
        return ObjectId(data)
    except InvalidId:
        raise InvalidObjectIdError(data)


def same_id(a, b) -> bool:
    if a is None or b is None:
        return False
    return str(a) == str(b)


def utcnow() -> datetime:
    """Naive UTC timestamp, the form BSON dates come back in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    return str(value)
