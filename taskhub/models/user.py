# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""User document and its embedded notifications."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from bson.objectid import ObjectId

from taskhub.models.base import MongoDocumentBase
from taskhub.util import utcnow

ROLE_USER = "user"
ROLE_MANAGER = "manager"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_MANAGER, ROLE_ADMIN)


@dataclass
class Notification(MongoDocumentBase):
    message: str
    event: str = "notification"
    data: Optional[dict[str, Any]] = None
    read: bool = False
    createdAt: datetime = field(default_factory=utcnow)


@dataclass
class User(MongoDocumentBase):
    name: str
    email: str
    password: str
    role: str = ROLE_USER
    team: Optional[ObjectId] = None
    mustResetPassword: bool = False
    notifications: list = field(default_factory=list)  # Notification
    createdAt: datetime = field(default_factory=utcnow)
    updatedAt: datetime = field(default_factory=utcnow)
