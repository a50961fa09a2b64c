"""
Request-shape validation.

validate() runs a marshmallow schema over a payload and returns the outcome as
a value instead of raising, so callers decide which API error to surface.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from marshmallow import Schema, ValidationError


@dataclass(frozen=True)
class ValidationResult:
    data: Dict[str, Any] = field(default_factory=dict)
    errors: List[Dict[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        if self.ok:
            return ""
        first = self.errors[0]
        return f"Validation error: {first['field']}: {first['message']}"


def _flatten(messages: Any, prefix: str = "") -> List[Dict[str, str]]:
    """Turn marshmallow's nested {field: [msg, ...]} into [{field, message}]."""
    if isinstance(messages, Mapping):
        out = []
        for key, value in messages.items():
            name = f"{prefix}.{key}" if prefix else str(key)
            out.extend(_flatten(value, name))
        return out
    if isinstance(messages, (list, tuple)):
        out = []
        for value in messages:
            out.extend(_flatten(value, prefix))
        return out
    return [{"field": prefix or "_schema", "message": str(messages)}]


def validate(schema: Schema, payload: Any) -> ValidationResult:
    """Validate `payload` against `schema` without raising."""
    try:
        data = schema.load(payload)
    except ValidationError as err:
        return ValidationResult(errors=_flatten(err.messages))
    return ValidationResult(data=data)
