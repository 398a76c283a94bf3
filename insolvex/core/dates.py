"""Date-value normalization.

Model output carries dates either as ``{"text": ..., "iso": ...}`` objects
or as bare strings. Bare strings are never parsed here; resolving a date to
ISO form is the extractor's job.
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from .coerce import as_str
from .models import NOT_FOUND, DateValue


class _RawDateValue(BaseModel):
    """Shape check for a ``{text, iso}`` object; member types are not enforced."""

    model_config = ConfigDict(extra="ignore")

    text: Any
    iso: Any


def _decode_date_object(raw: Any) -> Optional[_RawDateValue]:
    if not isinstance(raw, dict):
        return None
    try:
        return _RawDateValue.model_validate(raw)
    except ValidationError:
        return None


def normalize_date(raw: Any) -> DateValue:
    """Coerce any value into a DateValue.

    >>> normalize_date("15 martie 2024")
    DateValue(text='15 martie 2024', iso=None)
    """
    if isinstance(raw, DateValue):
        raw = raw.model_dump()
    decoded = _decode_date_object(raw)
    if decoded is not None:
        iso = decoded.iso if isinstance(decoded.iso, str) and decoded.iso.strip() else None
        return DateValue(text=as_str(decoded.text), iso=iso)
    if isinstance(raw, str) and raw.strip():
        return DateValue(text=raw, iso=None)
    return DateValue(text=NOT_FOUND, iso=None)


def date_to_iso(value: Any) -> Optional[str]:
    """ISO string carried by a DateValue, a date dict or a bare string."""
    if value is None:
        return None
    if isinstance(value, str):
        return value or None
    if isinstance(value, DateValue):
        return value.iso
    if isinstance(value, dict):
        iso = value.get("iso")
        return iso if isinstance(iso, str) and iso else None
    return None
