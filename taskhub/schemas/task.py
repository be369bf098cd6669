# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Schemas for task creation and updates."""
from datetime import datetime, timezone
from typing import Optional

from pydantic import Field, field_validator, model_validator

from taskhub.models.task import TASK_PRIORITIES, TASK_STATUSES
from taskhub.schemas.common import SanitizedModel
from taskhub.util import utcnow


def _normalise_choice(v: Optional[str], choices: tuple, name: str) -> Optional[str]:
    if v is not None:
        v = v.lower().strip()
        if v not in choices:
            raise ValueError(f"{name} must be one of {choices}")
    return v


def _due_date_not_past(v: Optional[datetime]) -> Optional[datetime]:
    """Store due dates as naive UTC; anything before today is rejected."""
    if v is None:
        return v
    if v.tzinfo is not None:
        v = v.astimezone(timezone.utc).replace(tzinfo=None)
    if v.date() < utcnow().date():
        raise ValueError("Due date cannot be in the past")
    return v


class TaskCreateRequest(SanitizedModel):
    title: str = Field(..., min_length=3, max_length=100)
    description: Optional[str] = Field("", max_length=2000)
    priority: str = "medium"
    status: str = "todo"
    due_date: datetime
    assigned_to: Optional[str] = None

    @field_validator("title")
    @classmethod
    def normalise_title(cls, v: str) -> str:
        return v.strip()

    @field_validator("priority")
    @classmethod
    def normalise_priority(cls, v: str) -> str:
        return _normalise_choice(v, TASK_PRIORITIES, "priority")

    @field_validator("status")
    @classmethod
    def normalise_status(cls, v: str) -> str:
        return _normalise_choice(v, TASK_STATUSES, "status")

    @field_validator("due_date")
    @classmethod
    def check_due_date(cls, v: datetime) -> datetime:
        return _due_date_not_past(v)


class AdminTaskCreateRequest(TaskCreateRequest):
    assigned_to: str = Field(..., min_length=1)


class TaskUpdateRequest(SanitizedModel):
    title: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    priority: Optional[str] = None
    status: Optional[str] = None
    due_date: Optional[datetime] = None
    assigned_to: Optional[str] = None

    @field_validator("priority")
    @classmethod
    def normalise_priority(cls, v: Optional[str]) -> Optional[str]:
        return _normalise_choice(v, TASK_PRIORITIES, "priority")

    @field_validator("status")
    @classmethod
    def normalise_status(cls, v: Optional[str]) -> Optional[str]:
        return _normalise_choice(v, TASK_STATUSES, "status")

    @field_validator("due_date")
    @classmethod
    def check_due_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _due_date_not_past(v)

    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.changes():
            raise ValueError("at least one field must be provided")
        return self
