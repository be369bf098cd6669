# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Team document."""
from dataclasses import dataclass, field
from datetime import datetime

from bson.objectid import ObjectId

from taskhub.models.base import MongoDocumentBase
from taskhub.util import utcnow


@dataclass
class Team(MongoDocumentBase):
    name: str
    manager: ObjectId
    members: list = field(default_factory=list)  # user ObjectIds, manager excluded
    createdAt: datetime = field(default_factory=utcnow)
    updatedAt: datetime = field(default_factory=utcnow)
