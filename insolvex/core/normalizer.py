"""Normalization of raw model output into an ExtractionResult.

The vision model is asked for a fixed JSON schema but routinely returns
something close to it: renamed keys, bare strings where objects are
expected, arrays where objects are expected, missing sections. This module
turns any such payload into a fully populated ExtractionResult.

Two layers do the work:

* ``merge_over_default`` walks a model's fields and coerces whatever the
  raw object holds under each field's wire name (or one of its legacy
  names) according to the field's declared type, falling back to the
  field default. It recurses into nested sections.
* ``normalize_extraction`` handles the reshaping that a field walk cannot
  express (court given as a string, debtor spread over ``case.debtor`` and
  ``parties.debtor``, liquidator given as ``appointedLiquidator``, ...).

Nothing here raises on bad data and nothing mutates its input.
"""
import logging
from functools import lru_cache
from inspect import isclass
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar, get_args, get_origin

from pydantic.alias_generators import to_camel

from .coerce import as_bool, as_list, as_mapping, as_number, as_str, first_str
from .dates import normalize_date
from .models import (
    NOT_FOUND,
    CaseInfo,
    Claims,
    ComplianceFlags,
    CreditorsMeeting,
    DateValue,
    Debtor,
    DocumentInfo,
    ExtractionResult,
    Parties,
    Practitioner,
    Reports,
    SchemaModel,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=SchemaModel)

LIQUIDATOR_ROLE = "lichidator_judiciar"

# Legacy key names accepted on input, per section, keyed by field name.
# The canonical (wire) name always wins when it holds a usable value.
DOCUMENT_SYNONYMS: Dict[str, Tuple[str, ...]] = {
    "doc_type": ("type",),
    "document_date": ("issuanceDate",),
}
CASE_SYNONYMS: Dict[str, Tuple[str, ...]] = {
    "case_number": ("fileNumber",),
}
PROCEDURE_SYNONYMS: Dict[str, Tuple[str, ...]] = {
    "procedure_type": ("type",),
}
CREDITORS_MEETING_SYNONYMS: Dict[str, Tuple[str, ...]] = {
    "meeting_date": ("date",),
}


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def _wire_name(model_cls: Type[SchemaModel], field_name: str) -> str:
    field = model_cls.model_fields[field_name]
    return field.alias or to_camel(field_name)


@lru_cache(maxsize=None)
def _field_kind(annotation: Any) -> str:
    if annotation is DateValue:
        return "date"
    if isclass(annotation) and issubclass(annotation, SchemaModel):
        return "model"
    if annotation is str:
        return "str"
    if get_origin(annotation) is list:
        return "list"
    args = set(get_args(annotation)) - {type(None)}
    if args == {bool}:
        return "bool"
    if args and args <= {int, float}:
        return "number"
    return "any"


def _pick(raw: Mapping[str, Any], names: Tuple[str, ...], strings_only: bool = False) -> Any:
    """First present value among ``names``, else None."""
    for name in names:
        value = raw.get(name)
        if strings_only and not isinstance(value, str):
            continue
        if _is_present(value):
            if name != names[0]:
                logger.debug("Using legacy key '%s' in place of '%s'", name, names[0])
            return value
    return None


def merge_over_default(
    model_cls: Type[M],
    raw: Any,
    synonyms: Optional[Mapping[str, Tuple[str, ...]]] = None,
    nested_synonyms: Optional[Mapping[str, Mapping[str, Tuple[str, ...]]]] = None,
) -> M:
    """Build ``model_cls`` from ``raw``, keeping defaults for anything unusable.

    Args:
        model_cls: Section model; its field defaults are the section default.
        raw: Candidate object from the model output. Anything that is not a
            JSON object yields the full section default.
        synonyms: Legacy key names per field name, tried after the wire name.
        nested_synonyms: Synonym tables for nested sections, keyed by field name.

    Returns:
        A new, fully populated instance of ``model_cls``.
    """
    source = as_mapping(raw)
    if source is None:
        return model_cls()

    synonyms = synonyms or {}
    nested_synonyms = nested_synonyms or {}
    values: Dict[str, Any] = {}

    for field_name, field in model_cls.model_fields.items():
        names = (_wire_name(model_cls, field_name),) + tuple(synonyms.get(field_name, ()))
        kind = _field_kind(field.annotation)
        value = _pick(source, names, strings_only=kind == "str")

        if kind == "str":
            values[field_name] = as_str(value, default=field.default)
        elif kind == "date":
            values[field_name] = normalize_date(value)
        elif kind == "model":
            values[field_name] = merge_over_default(
                field.annotation, value, nested_synonyms.get(field_name)
            )
        elif kind == "list":
            values[field_name] = as_list(value)
        elif kind == "bool":
            values[field_name] = as_bool(value)
        elif kind == "number":
            values[field_name] = as_number(value)
        else:
            values[field_name] = value if value is not None else field.get_default(call_default_factory=True)

    return model_cls(**values)


def _join_administrators(*candidates: Any) -> str:
    for candidate in candidates:
        if not isinstance(candidate, list):
            continue
        names = [str(item).strip() for item in candidate if item is not None and str(item).strip()]
        if names:
            return ", ".join(names)
    return NOT_FOUND


def normalize_document(raw_document: Any, raw_case: Mapping[str, Any]) -> DocumentInfo:
    document = merge_over_default(DocumentInfo, raw_document, DOCUMENT_SYNONYMS)
    if document.document_number == NOT_FOUND:
        document.document_number = as_str(raw_case.get("fileNumber"))
    return document


def normalize_case(raw_case: Mapping[str, Any]) -> CaseInfo:
    prepared = dict(raw_case)
    court = raw_case.get("court")
    if isinstance(court, str):
        prepared["court"] = {"name": court.strip()}
    return merge_over_default(
        CaseInfo,
        prepared,
        CASE_SYNONYMS,
        nested_synonyms={"procedure": PROCEDURE_SYNONYMS},
    )


def normalize_debtor(raw_parties: Mapping[str, Any], raw_case: Mapping[str, Any]) -> Debtor:
    """Debtor from ``parties.debtor``, completed from ``case.debtor``.

    ``parties.debtor`` may be a full object or only the debtor name; the
    legacy layout kept identifiers under ``case.debtor.identifier``.
    """
    case_debtor = as_mapping(raw_case.get("debtor")) or {}
    identifier = as_mapping(case_debtor.get("identifier")) or {}
    raw_debtor = raw_parties.get("debtor")
    debtor_obj = as_mapping(raw_debtor)

    if debtor_obj is not None:
        debtor = merge_over_default(Debtor, debtor_obj)
        administrators = (debtor_obj.get("administrators"), raw_parties.get("administrators"))
    else:
        name = raw_debtor.strip() if isinstance(raw_debtor, str) else None
        debtor = Debtor(name=as_str(name))
        administrators = (raw_parties.get("administrators"),)

    if debtor.name == NOT_FOUND:
        debtor.name = as_str(case_debtor.get("name"))
    if debtor.cui == NOT_FOUND:
        debtor.cui = first_str(identifier.get("cui"), case_debtor.get("cui"))
    if debtor.trade_register_no == NOT_FOUND:
        debtor.trade_register_no = first_str(
            identifier.get("registrationNumber"), case_debtor.get("registrationNumber")
        )
    if debtor.address == NOT_FOUND:
        debtor.address = as_str(case_debtor.get("address"))
    if debtor.administrator == NOT_FOUND:
        debtor.administrator = _join_administrators(*administrators)
    return debtor


def normalize_practitioner(raw_parties: Mapping[str, Any]) -> Practitioner:
    """Practitioner from ``parties.practitioner`` or legacy ``appointedLiquidator``."""
    practitioner = as_mapping(raw_parties.get("practitioner"))
    if practitioner is not None:
        return merge_over_default(Practitioner, practitioner)

    liquidator_raw = raw_parties.get("appointedLiquidator")
    if isinstance(liquidator_raw, str) and liquidator_raw.strip():
        return Practitioner(role=LIQUIDATOR_ROLE, name=liquidator_raw.strip())

    liquidator = as_mapping(liquidator_raw)
    if liquidator is None:
        return Practitioner()

    logger.debug("Mapping appointedLiquidator onto practitioner")
    identifier = as_mapping(liquidator.get("identifier")) or {}
    return Practitioner(
        role=LIQUIDATOR_ROLE,
        name=as_str(liquidator.get("name")),
        fiscal_id=first_str(identifier.get("fiscalCode"), liquidator.get("fiscalCode")),
        rfo=first_str(identifier.get("registrationNumber"), liquidator.get("registrationNumber")),
        address=first_str(liquidator.get("headquarters"), liquidator.get("address")),
    )


def normalize_parties(raw_parties: Mapping[str, Any], raw_case: Mapping[str, Any]) -> Parties:
    return Parties(
        debtor=normalize_debtor(raw_parties, raw_case),
        practitioner=normalize_practitioner(raw_parties),
        creditors=as_list(raw_parties.get("creditors")),
    )


def normalize_extraction(raw: Any, raw_json_text: str = "") -> ExtractionResult:
    """Normalize parsed model output into a complete ExtractionResult.

    Args:
        raw: Parsed JSON from the model. ``None`` or any non-object value
            yields the all-defaults record.
        raw_json_text: The model's response text, stored verbatim.

    Returns:
        ExtractionResult with every field populated.
    """
    top = as_mapping(raw)
    if top is None:
        if raw is not None:
            logger.debug("Top-level payload is %s, not an object; using defaults", type(raw).__name__)
        top = {}

    raw_case = as_mapping(top.get("case")) or {}
    raw_parties = as_mapping(top.get("parties")) or {}

    for section in ("claims", "creditorsMeeting", "reports", "complianceFlags"):
        if section in top and as_mapping(top[section]) is None:
            logger.debug("Section '%s' is %s; using section default", section, type(top[section]).__name__)

    return ExtractionResult(
        document=normalize_document(top.get("document"), raw_case),
        case=normalize_case(raw_case),
        parties=normalize_parties(raw_parties, raw_case),
        deadlines=as_list(top.get("deadlines")),
        claims=merge_over_default(Claims, top.get("claims")),
        creditors_meeting=merge_over_default(
            CreditorsMeeting, top.get("creditorsMeeting"), CREDITORS_MEETING_SYNONYMS
        ),
        reports=merge_over_default(Reports, top.get("reports")),
        compliance_flags=merge_over_default(ComplianceFlags, top.get("complianceFlags")),
        other_important_info=as_str(top.get("otherImportantInfo")),
        raw_json=raw_json_text if isinstance(raw_json_text, str) else "",
    )
