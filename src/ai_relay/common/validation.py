"""Presence checks for inbound payloads."""
from __future__ import annotations
from typing import Any, Mapping, Sequence

from ai_relay.common.errors import ValidationError


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    return False


def missing_fields(payload: Mapping[str, Any], fields: Sequence[str]) -> list[str]:
    """Return the names in ``fields`` that are absent or empty in ``payload``."""
    return [name for name in fields if _is_missing(payload.get(name))]


def _default_message(names: Sequence[str]) -> str:
    if len(names) == 1:
        joined = names[0]
    elif len(names) == 2:
        joined = f"{names[0]} or {names[1]}"
    else:
        joined = ", ".join(names[:-1]) + f", or {names[-1]}"
    return f"Missing {joined} in request."


def require_fields(
    payload: Mapping[str, Any],
    fields: Sequence[str],
    message: str | None = None,
) -> None:
    """
    Ensure every required field is present.

    String fields must also be non-empty. No coercion is applied.

    Args:
        payload: Field name to value mapping.
        fields: Required field names, in the order they should be reported.
        message: Error message to use instead of one built from the field names.

    Raises:
        ValidationError: If any field is missing.
    """
    missing = missing_fields(payload, fields)
    if missing:
        raise ValidationError(message or _default_message(missing))
