"""Country-code normalization and the blocklist predicate.

Codes are ISO 3166-1 alpha-2.  Every comparison uppercases both sides,
even when the inputs were normalized upstream.
"""

from __future__ import annotations

from collections.abc import Iterable


def normalize_country_code(value: object) -> str | None:
    """Return *value* as an uppercase two-letter code, or None if it isn't one."""
    if not isinstance(value, str):
        return None
    cleaned = value.strip().upper()
    if len(cleaned) != 2 or not (cleaned.isascii() and cleaned.isalpha()):
        return None
    return cleaned


def normalize_blocklist(codes: Iterable[str]) -> tuple[str, ...]:
    """Uppercase and de-duplicate *codes*, keeping first-seen order.

    Raises:
        ValueError: If any entry is not a two-letter country code.
    """
    seen: dict[str, None] = {}
    for raw in codes:
        code = normalize_country_code(raw)
        if code is None:
            msg = f"Invalid country code in blocklist: {raw!r}"
            raise ValueError(msg)
        seen.setdefault(code, None)
    return tuple(seen)


def is_blocked(code: str, blocked: Iterable[str]) -> bool:
    """Whether *code* appears in *blocked*, ignoring case on both sides."""
    needle = code.strip().upper()
    return needle in {entry.strip().upper() for entry in blocked}
