# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Schemas for admin-side user management."""
from typing import Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from taskhub.models.user import ROLE_USER, ROLES
from taskhub.schemas.common import SanitizedModel


def _normalise_role(v: Optional[str]) -> Optional[str]:
    if v is not None:
        v = v.lower().strip()
        if v not in ROLES:
            raise ValueError(f"role must be one of {ROLES}")
    return v


class AdminCreateUserRequest(SanitizedModel):
    name: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: str = ROLE_USER

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("role")
    @classmethod
    def normalise_role(cls, v: str) -> str:
        return _normalise_role(v)


class UserUpdateRequest(SanitizedModel):
    name: Optional[str] = Field(None, min_length=3, max_length=50)
    email: Optional[EmailStr] = None
    role: Optional[str] = None

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v else v

    @field_validator("role")
    @classmethod
    def normalise_role(cls, v: Optional[str]) -> Optional[str]:
        return _normalise_role(v)

    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.changes():
            raise ValueError("at least one of name, email, role is required")
        return self


class AssignTeamRequest(SanitizedModel):
    team_id: str = Field(..., min_length=1)
