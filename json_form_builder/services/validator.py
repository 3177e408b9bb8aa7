"""Document validation and JSON serialization helpers."""

import json
from typing import Any

from ..models.core import ValidationResult, ValidityState


def _reject_constant(name: str) -> Any:
    # json accepts NaN/Infinity by default; they are not JSON
    raise ValueError(f"Invalid JSON constant: {name}")


def validate(text: str) -> ValidationResult:
    """
    Parse raw document text.

    Blank text is ``empty`` and carries neither a value nor a diagnostic.
    Anything else is parsed strictly; a failure sets the parser's message
    as the diagnostic.

    Args:
        text: Document text as typed by the user

    Returns:
        ValidationResult describing exactly one of empty, valid or invalid
    """
    if text is None or not text.strip():
        return ValidationResult(state=ValidityState.EMPTY)

    try:
        value = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        return ValidationResult(state=ValidityState.INVALID, diagnostic=str(e))
    except (ValueError, RecursionError) as e:
        return ValidationResult(state=ValidityState.INVALID, diagnostic=str(e) or "Invalid JSON format")

    return ValidationResult(state=ValidityState.VALID, value=value)


def _plain_numbers(value: Any) -> Any:
    # Integral floats print without a fraction: 1e2 -> 100, 1.0 -> 1
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e21:
            return int(value)
        return value
    if isinstance(value, dict):
        return {key: _plain_numbers(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain_numbers(item) for item in value]
    return value


def canonical_json(value: Any) -> str:
    """Compact serialization used for request bodies and character counts."""
    return json.dumps(_plain_numbers(value), separators=(',', ':'), ensure_ascii=False)


def pretty_json(value: Any) -> str:
    """Formatted serialization with 2-space indentation."""
    return json.dumps(_plain_numbers(value), indent=2, ensure_ascii=False)
