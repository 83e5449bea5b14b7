"""Shared parsing helpers for config and command value normalization."""

from __future__ import annotations

U64_MAX = (1 << 64) - 1


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_u64(value: object, field_name: str) -> int:
    """Parse an unsigned 64-bit integer from an int or decimal text token.

    Raises:
        ValueError: If the value is not a decimal integer in `[0, 2**64 - 1]`.
    """

    if isinstance(value, bool):
        raise ValueError(f"`{field_name}` must be an unsigned 64-bit integer.")
    if isinstance(value, int):
        parsed = value
    else:
        normalized = normalize_optional_string(value)
        if normalized is None or not (normalized.isascii() and normalized.isdigit()):
            raise ValueError(f"`{field_name}` must be an unsigned 64-bit integer.")
        parsed = int(normalized)

    if parsed < 0 or parsed > U64_MAX:
        raise ValueError(f"`{field_name}` must be an unsigned 64-bit integer.")
    return parsed
