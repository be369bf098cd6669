# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Schemas for registration, login and password resets."""
from pydantic import EmailStr, Field, field_validator

from taskhub.schemas.common import SanitizedModel


class _EmailModel(SanitizedModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.strip().lower()


class RegisterRequest(_EmailModel):
    name: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)

    @field_validator("name")
    @classmethod
    def normalise_name(cls, v: str) -> str:
        return v.strip()


class LoginRequest(_EmailModel):
    password: str = Field(..., min_length=6)


class ResetPasswordRequest(_EmailModel):
    new_password: str = Field(..., min_length=6)


class ChangePasswordRequest(SanitizedModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)
