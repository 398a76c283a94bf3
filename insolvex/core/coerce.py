"""Scalar coercers for untrusted model output.

Each coercer is total: it returns the value unchanged when it already has
the expected type and a default otherwise. No conversion between types is
attempted (a numeric string stays a string and is rejected as a number).
"""
from typing import Any, Callable, List, Mapping, Optional

from .models import NOT_FOUND, Number


def as_str(value: Any, default: str = NOT_FOUND) -> str:
    """Return ``value`` if it is a string with visible content, else ``default``."""
    if isinstance(value, str) and value.strip():
        return value
    return default


def as_number(value: Any) -> Optional[Number]:
    """Return ``value`` if it is an int or float (bool excluded), else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    return None


def as_bool(value: Any) -> Optional[bool]:
    """Return ``value`` if it is a bool, else None."""
    if isinstance(value, bool):
        return value
    return None


def as_list(value: Any, default_factory: Callable[[], List[Any]] = list) -> List[Any]:
    """Return ``value`` if it is a list, else a fresh default.

    Elements are not inspected.
    """
    if isinstance(value, list):
        return value
    return default_factory()


def as_mapping(value: Any) -> Optional[Mapping[str, Any]]:
    """Return ``value`` if it is a JSON object, else None."""
    if isinstance(value, Mapping):
        return value
    return None


def first_str(*candidates: Any, default: str = NOT_FOUND) -> str:
    """Return the first candidate with visible string content.

    Empty and whitespace-only strings count as absent, so precedence falls
    through to the next candidate and finally to ``default``.
    """
    for candidate in candidates:
        if isinstance(candidate, str) and candidate.strip():
            return candidate
    return default


def is_not_found(value: Any) -> bool:
    """True for the sentinel, empty strings and non-strings."""
    return as_str(value) == NOT_FOUND
