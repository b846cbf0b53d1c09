"""Input normalization helpers applied before validation and persistence."""

import re
from typing import Any, Dict, Iterable


_NON_DIGIT_PATTERN = re.compile(r"[^0-9]")


def strip_non_digits(value: Any) -> Any:
    """
    Remove every non-digit character from a tax identifier.

    "12.345.678/0001-90" becomes "12345678000190". Values that are not
    strings (None, ints) are returned unchanged so that the required and
    format rules can report them. Idempotent.
    """
    if not isinstance(value, str):
        return value
    return _NON_DIGIT_PATTERN.sub("", value)


def normalize_digit_fields(payload: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    """Return a copy of payload with the given fields digit-stripped when present."""
    normalized = dict(payload)
    for field_name in fields:
        if field_name in normalized:
            normalized[field_name] = strip_non_digits(normalized[field_name])
    return normalized
