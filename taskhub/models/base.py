# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Base dataclasses for documents written to MongoDB."""
from dataclasses import asdict, dataclass
from typing import Optional

from bson.objectid import ObjectId


@dataclass
class SimpleMongoDocumentBase:
    """
    Represents an embedded mongo document.
    Provides conversion to the dict form handed to the driver.
    """

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class MongoDocumentBase(SimpleMongoDocumentBase):
    """
    Represents a mongo document with an _id property.
    `_id` is left as None for new documents; MongoDB assigns it on insert.
    """
    _id: Optional[ObjectId]

    @property
    def id(self):
        return self._id
