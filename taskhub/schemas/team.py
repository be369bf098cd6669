# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Schemas for team management."""
from pydantic import Field, field_validator

from taskhub.schemas.common import SanitizedModel


class TeamCreateRequest(SanitizedModel):
    name: str = Field(..., min_length=3, max_length=100)

    @field_validator("name")
    @classmethod
    def normalise_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("name must have at least 3 non-blank characters")
        return v


class MemberRequest(SanitizedModel):
    user_id: str = Field(..., min_length=1)
