# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Task document and its lifecycle vocabularies."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from bson.objectid import ObjectId

from taskhub.models.base import MongoDocumentBase
from taskhub.util import utcnow

STATUS_TODO = "todo"
STATUS_IN_PROGRESS = "in-progress"
STATUS_DONE = "done"
TASK_STATUSES = (STATUS_TODO, STATUS_IN_PROGRESS, STATUS_DONE)

TASK_PRIORITIES = ("low", "medium", "high")


@dataclass
class Task(MongoDocumentBase):
    title: str
    createdBy: ObjectId
    dueDate: datetime
    description: str = ""
    status: str = STATUS_TODO
    priority: str = "medium"
    assignedTo: Optional[ObjectId] = None
    createdAt: datetime = field(default_factory=utcnow)
    updatedAt: datetime = field(default_factory=utcnow)
