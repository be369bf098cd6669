# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Shared schema base: camelCase aliases and markup sanitization of string input."""
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


def sanitize_value(value: Any) -> Any:
    """Recursively neutralise angle brackets in strings; other values pass through."""
    if isinstance(value, str):
        return value.replace("<", "&lt;").replace(">", "&gt;")
    if isinstance(value, list):
        return [sanitize_value(v) for v in value]
    if isinstance(value, dict):
        return {k: sanitize_value(v) for k, v in value.items()}
    return value


class SanitizedModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def sanitize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        # passwords are hashed, never rendered
        return {
            key: value if "password" in key.lower() else sanitize_value(value)
            for key, value in data.items()
        }

    def changes(self) -> dict[str, Any]:
        """Fields the client actually sent, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)
