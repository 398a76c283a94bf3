"""Structured extraction and case tracking for Romanian insolvency documents."""

__version__ = "0.1.0"

from .core.aggregation import (
    InsolvencyCase,
    InsolvencyDocument,
    aggregate_deadlines,
    derive_case_stage,
    next_upcoming_hearing_iso,
)
from .core.matching import best_match, best_match_two_sided
from .core.models import NOT_FOUND, ExtractionResult, default_extraction
from .core.normalizer import normalize_extraction

__all__ = [
    "__version__",
    "NOT_FOUND",
    "ExtractionResult",
    "InsolvencyCase",
    "InsolvencyDocument",
    "aggregate_deadlines",
    "best_match",
    "best_match_two_sided",
    "default_extraction",
    "derive_case_stage",
    "next_upcoming_hearing_iso",
    "normalize_extraction",
]
