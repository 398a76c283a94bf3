"""Case-level views derived from the documents of one insolvency case.

Stage, deadlines and next hearing are never stored on the case; they are
recomputed from the documents on every read.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import Field, field_validator

from .coerce import as_str
from .dates import date_to_iso, normalize_date
from .models import (
    AggregatedDeadline,
    DateValue,
    DeadlineType,
    ExtractionResult,
    ProcedureStage,
    SchemaModel,
)
from .normalizer import normalize_extraction

logger = logging.getLogger(__name__)

UNKNOWN_STAGE = ProcedureStage.UNKNOWN.value

STAGE_ORDER: Dict[str, int] = {
    stage.value: rank
    for rank, stage in enumerate(s for s in ProcedureStage if s is not ProcedureStage.UNKNOWN)
}
STAGE_ORDER[UNKNOWN_STAGE] = -1


class InsolvencyDocument(SchemaModel):
    """One uploaded document and its extraction."""
    id: str = Field(..., description="Document identifier")
    case_id: Optional[str] = None
    file_name: str = Field(default="")
    uploaded_at: datetime = Field(default_factory=datetime.now)
    uploaded_by: Optional[str] = None
    extraction: ExtractionResult = Field(default_factory=ExtractionResult)

    @field_validator("extraction", mode="before")
    @classmethod
    def normalize_stored_extraction(cls, v):
        """Accept raw or previously stored extraction dicts."""
        if v is None:
            return ExtractionResult()
        if isinstance(v, ExtractionResult):
            return v
        raw_json = v.get("rawJson", "") if isinstance(v, Mapping) else ""
        return normalize_extraction(v, raw_json if isinstance(raw_json, str) else "")


class InsolvencyCase(SchemaModel):
    """A case groups the documents filed for one debtor."""
    id: str = Field(..., description="Case identifier")
    title: str = Field(default="")
    company_id: Optional[str] = None
    documents: List[InsolvencyDocument] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)
    created_by: Optional[str] = None

    @property
    def stage(self) -> str:
        return derive_case_stage(self.documents)

    @property
    def deadlines(self) -> List[AggregatedDeadline]:
        return aggregate_deadlines(self.documents)

    @property
    def next_hearing_iso(self) -> Optional[str]:
        return next_upcoming_hearing_iso(self.documents)


def stage_rank(stage: Any) -> int:
    """Position of ``stage`` in the procedure; -1 when not a known stage."""
    if not isinstance(stage, str):
        return -1
    return STAGE_ORDER.get(stage, -1)


def derive_case_stage(documents: Sequence[InsolvencyDocument]) -> str:
    """Most advanced stage seen in any document, or "unknown"."""
    best_stage = UNKNOWN_STAGE
    best_rank = -1
    for document in documents:
        stage = document.extraction.case.procedure.stage
        rank = stage_rank(stage)
        if rank > best_rank:
            best_rank = rank
            best_stage = stage
    return best_stage


def _deadline_date(raw: Any) -> DateValue:
    # Deadline dates are read leniently: a bare {"iso": ...} still sorts.
    if isinstance(raw, Mapping):
        return DateValue(text=as_str(raw.get("text")), iso=date_to_iso(raw))
    return normalize_date(raw)


def _deadline_from_entry(entry: Mapping[str, Any], source_doc_id: str) -> AggregatedDeadline:
    return AggregatedDeadline(
        type=as_str(entry.get("type"), default=DeadlineType.OTHER.value),
        date=_deadline_date(entry.get("date")),
        time=as_str(entry.get("time")),
        legal_basis=as_str(entry.get("legalBasis")),
        notes=as_str(entry.get("notes")),
        source_doc_id=source_doc_id,
    )


def _dedup_key(entry: Mapping[str, Any]) -> Tuple[str, ...]:
    # Keyed on the raw entry: a missing type or time differs from "other" or "Not found".
    raw_date = entry.get("date")
    if isinstance(raw_date, Mapping):
        date_part = raw_date.get("iso")
        if date_part is None:
            date_part = raw_date.get("text")
    else:
        date_part = raw_date
    if date_part is None:
        date_part = ""
    # repr keeps unhashable model output (lists, objects) usable as a key.
    return tuple(repr(part) for part in (entry.get("type"), date_part, entry.get("time")))


def aggregate_deadlines(documents: Sequence[InsolvencyDocument]) -> List[AggregatedDeadline]:
    """Deadlines of all documents, de-duplicated and sorted by date.

    The first occurrence of a raw (type, date, time) triple wins. Deadlines
    without an ISO date keep their relative order at the end.
    """
    seen = set()
    deadlines: List[AggregatedDeadline] = []
    for document in documents:
        for entry in document.extraction.deadlines:
            if not isinstance(entry, Mapping):
                logger.debug("Skipping non-object deadline in document %s", document.id)
                continue
            key = _dedup_key(entry)
            if key in seen:
                continue
            seen.add(key)
            deadlines.append(_deadline_from_entry(entry, document.id))

    deadlines.sort(key=lambda d: (d.date.iso is None, d.date.iso or ""))
    return deadlines


def next_upcoming_hearing_iso(documents: Sequence[InsolvencyDocument]) -> Optional[str]:
    """Earliest hearing date across the case documents.

    Looks at both ``case.importantDates.nextHearingDateTime`` and
    ``next_hearing`` deadlines, since extraction may fill either.
    """
    dates = []
    for document in documents:
        extraction = document.extraction
        iso = date_to_iso(extraction.case.important_dates.next_hearing_date_time)
        if iso:
            dates.append(iso)
        for entry in extraction.deadlines:
            if isinstance(entry, Mapping) and entry.get("type") == DeadlineType.NEXT_HEARING.value:
                iso = date_to_iso(entry.get("date"))
                if iso:
                    dates.append(iso)
    return min(dates) if dates else None


def format_stage(stage: str) -> str:
    """Display label for a stage token ("claims_window" -> "Claims Window")."""
    if not stage or stage == UNKNOWN_STAGE:
        return "Unknown"
    return " ".join(word[:1].upper() + word[1:] for word in stage.split("_"))
