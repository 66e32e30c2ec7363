"""Lightweight validation helpers."""

from typing import Any, Iterable


def ensure_present(value: Any, field: str) -> None:
    """Raise ValueError if value is falsy."""
    if value in (None, "", []):
        raise ValueError(f"{field} is required")


def ensure_choice(value: str, field: str, choices: Iterable[str]) -> str:
    """Normalise ``value`` and reject anything outside ``choices``."""
    allowed = tuple(choices)
    normalised = (value or "").strip().lower()
    if normalised not in allowed:
        raise ValueError(f"{field} must be one of {', '.join(allowed)}, got {value!r}")
    return normalised
