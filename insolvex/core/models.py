"""Canonical data models for insolvency document extraction.

Every model here carries a complete set of defaults, so instantiating a
model with no arguments yields the section default. Field names are
snake_case in Python and camelCase on the wire (``model_dump(by_alias=True)``).
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

NOT_FOUND = "Not found"

Number = Union[int, float]


class DocumentType(str, Enum):
    """Document classification types."""
    COURT_OPENING_DECISION = "court_opening_decision"
    NOTIFICATION_OPENING = "notification_opening"
    REPORT_ART_97 = "report_art_97"
    CLAIMS_TABLE_PRELIMINARY = "claims_table_preliminary"
    CLAIMS_TABLE_DEFINITIVE = "claims_table_definitive"
    CREDITORS_MEETING_MINUTES = "creditors_meeting_minutes"
    FINAL_REPORT_ART_167 = "final_report_art_167"
    OTHER = "other"


class ProcedureType(str, Enum):
    """Insolvency procedure types (Legea 85/2014)."""
    FALIMENT_SIMPLIFICAT = "faliment_simplificat"
    FALIMENT = "faliment"
    INSOLVENTA = "insolventa"
    REORGANIZARE = "reorganizare"
    OTHER = "other"


class ProcedureStage(str, Enum):
    """Procedure stages, declared in procedural order."""
    REQUEST = "request"
    OPENED = "opened"
    CLAIMS_WINDOW = "claims_window"
    PRELIMINARY_TABLE = "preliminary_table"
    DEFINITIVE_TABLE = "definitive_table"
    LIQUIDATION = "liquidation"
    FINAL_REPORT = "final_report"
    CLOSURE_REQUESTED = "closure_requested"
    CLOSED = "closed"
    UNKNOWN = "unknown"


class DeadlineType(str, Enum):
    """Deadline types found in court notices."""
    CLAIMS_SUBMISSION = "claims_submission"
    CLAIMS_VERIFICATION_PRELIMINARY_TABLE = "claims_verification_preliminary_table"
    DEFINITIVE_TABLE = "definitive_table"
    CREDITORS_MEETING = "creditors_meeting"
    APPEAL = "appeal"
    OPPOSITION = "opposition"
    NEXT_HEARING = "next_hearing"
    OTHER = "other"


class CreditorType(str, Enum):
    """Creditor rank as inferred from claims table headings."""
    BUGETAR = "bugetar"
    SALARIAL = "salarial"
    GARANTAT = "garantat"
    CHIROGRAFAR = "chirografar"
    ALTUL = "altul"
    UNKNOWN = "unknown"


class SchemaModel(BaseModel):
    """Base for every record serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> Dict[str, Any]:
        """Dump to a JSON-ready dict using the wire (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True)


class DateValue(SchemaModel):
    """A date as printed in the document plus its ISO form when known."""
    text: str = Field(default=NOT_FOUND, description="Date as written in the document")
    iso: Optional[str] = Field(default=None, description="YYYY-MM-DD when confidently resolved")


class DocumentInfo(SchemaModel):
    doc_type: str = Field(default=DocumentType.OTHER.value)
    language: str = Field(default="ro")
    issuing_entity: str = Field(default=NOT_FOUND)
    document_number: str = Field(default=NOT_FOUND)
    document_date: DateValue = Field(default_factory=DateValue)
    source_hints: str = Field(default=NOT_FOUND)


class Court(SchemaModel):
    name: str = Field(default=NOT_FOUND)
    section: str = Field(default=NOT_FOUND)
    registry_address: str = Field(default=NOT_FOUND)
    registry_phone: str = Field(default=NOT_FOUND)
    registry_hours: str = Field(default=NOT_FOUND)


class Procedure(SchemaModel):
    law: str = Field(default="Legea 85/2014")
    procedure_type: str = Field(default=ProcedureType.OTHER.value)
    stage: str = Field(default=ProcedureStage.UNKNOWN.value)
    administration_right_lifted: Optional[bool] = None
    legal_basis_articles: List[Any] = Field(default_factory=list)


class ImportantDates(SchemaModel):
    request_filed_date: DateValue = Field(default_factory=DateValue)
    opening_date: DateValue = Field(default_factory=DateValue)
    next_hearing_date_time: DateValue = Field(default_factory=DateValue)


class CaseInfo(SchemaModel):
    case_number: str = Field(default=NOT_FOUND)
    court: Court = Field(default_factory=Court)
    judge_syndic: str = Field(default=NOT_FOUND)
    procedure: Procedure = Field(default_factory=Procedure)
    important_dates: ImportantDates = Field(default_factory=ImportantDates)


class Debtor(SchemaModel):
    """The insolvent company."""
    name: str = Field(default=NOT_FOUND)
    cui: str = Field(default=NOT_FOUND, description="National tax id (CUI)")
    trade_register_no: str = Field(default=NOT_FOUND)
    address: str = Field(default=NOT_FOUND)
    locality: str = Field(default=NOT_FOUND)
    county: str = Field(default=NOT_FOUND)
    administrator: str = Field(default=NOT_FOUND, description="Administrator name(s), comma separated")
    associate_or_shareholder: str = Field(default=NOT_FOUND)
    caen: str = Field(default=NOT_FOUND, description="Industry code")
    incorporation_year: str = Field(default=NOT_FOUND)
    share_capital_ron: Optional[Number] = None


class Practitioner(SchemaModel):
    """Insolvency practitioner (judicial administrator or liquidator)."""
    role: str = Field(default=NOT_FOUND)
    name: str = Field(default=NOT_FOUND)
    fiscal_id: str = Field(default=NOT_FOUND)
    rfo: str = Field(default=NOT_FOUND, description="UNPIR registration number")
    representative: str = Field(default=NOT_FOUND)
    address: str = Field(default=NOT_FOUND)
    email: str = Field(default=NOT_FOUND)
    phone: str = Field(default=NOT_FOUND)
    fax: str = Field(default=NOT_FOUND)
    appointed_date: DateValue = Field(default_factory=DateValue)
    confirmed_date: DateValue = Field(default_factory=DateValue)


class Parties(SchemaModel):
    debtor: Debtor = Field(default_factory=Debtor)
    practitioner: Practitioner = Field(default_factory=Practitioner)
    creditors: List[Any] = Field(default_factory=list)


class Claims(SchemaModel):
    table_type: str = Field(default="unknown")
    table_date: DateValue = Field(default_factory=DateValue)
    total_admitted_ron: Optional[Number] = None
    total_declared_ron: Optional[Number] = None
    currency: str = Field(default=NOT_FOUND)
    entries: List[Any] = Field(default_factory=list)


class FeeApproved(SchemaModel):
    fixed_fee_ron: Optional[Number] = None
    vat_included: Optional[bool] = None
    success_fee_percent: Optional[Number] = None
    payment_source: str = Field(default="unknown")


class MeetingDecisions(SchemaModel):
    practitioner_confirmed: Optional[bool] = None
    committee_formed: Optional[bool] = None
    committee_notes: str = Field(default=NOT_FOUND)
    fee_approved: FeeApproved = Field(default_factory=FeeApproved)


class CreditorsMeeting(SchemaModel):
    meeting_date: DateValue = Field(default_factory=DateValue)
    meeting_time: str = Field(default=NOT_FOUND)
    location: str = Field(default=NOT_FOUND)
    quorum_percent: Optional[Number] = None
    agenda: List[Any] = Field(default_factory=list)
    decisions: MeetingDecisions = Field(default_factory=MeetingDecisions)
    voting_summary: str = Field(default=NOT_FOUND)


class AvoidanceReview(SchemaModel):
    reviewed: Optional[bool] = None
    suspicious_transactions_found: Optional[bool] = None
    actions_filed: Optional[bool] = None
    notes: str = Field(default=NOT_FOUND)


class LiabilityAssessment(SchemaModel):
    reviewed: Optional[bool] = None
    culpable_persons_identified: Optional[bool] = None
    action_proposed_or_filed: Optional[bool] = None
    notes: str = Field(default=NOT_FOUND)


class Financials(SchemaModel):
    years_covered: List[Any] = Field(default_factory=list)
    total_assets_ron: Optional[Number] = None
    total_liabilities_ron: Optional[Number] = None
    net_equity_ron: Optional[Number] = None
    cash_ron: Optional[Number] = None
    receivables_ron: Optional[Number] = None
    notes: str = Field(default=NOT_FOUND)


class Art97Report(SchemaModel):
    """Report on the causes of insolvency (art. 97)."""
    issued_date: DateValue = Field(default_factory=DateValue)
    causes_of_insolvency: List[Any] = Field(default_factory=list)
    litigation_found: Optional[bool] = None
    avoidance_review: AvoidanceReview = Field(default_factory=AvoidanceReview)
    liability_assessment_art169: LiabilityAssessment = Field(default_factory=LiabilityAssessment)
    financials: Financials = Field(default_factory=Financials)


class FinalArt167Report(SchemaModel):
    """Final report (art. 167)."""
    issued_date: DateValue = Field(default_factory=DateValue)
    assets_identified: Optional[bool] = None
    saleable_assets_found: Optional[bool] = None
    sums_available_for_distribution_ron: Optional[Number] = None
    recovery_rate_percent: Optional[Number] = None
    final_balance_sheet_date: DateValue = Field(default_factory=DateValue)
    closure_proposed: Optional[bool] = None
    closure_legal_basis: str = Field(default=NOT_FOUND)
    deregistration_orc_proposed: Optional[bool] = Field(default=None, alias="deregistrationORCProposed")
    practitioner_fee_requested_from_unpir: Optional[bool] = Field(
        default=None, alias="practitionerFeeRequestedFromUNPIR"
    )
    notes: str = Field(default=NOT_FOUND)


class Reports(SchemaModel):
    art97: Art97Report = Field(default_factory=Art97Report)
    final_art167: FinalArt167Report = Field(default_factory=FinalArt167Report)


class ComplianceFlags(SchemaModel):
    administration_right_lifted: Optional[bool] = None
    individual_actions_suspended: Optional[bool] = None
    publication_in_bpi_referenced: Optional[bool] = Field(default=None, alias="publicationInBPIReferenced")


class ExtractionResult(SchemaModel):
    """Normalized extraction of a single insolvency document."""
    document: DocumentInfo = Field(default_factory=DocumentInfo)
    case: CaseInfo = Field(default_factory=CaseInfo)
    parties: Parties = Field(default_factory=Parties)
    deadlines: List[Any] = Field(default_factory=list)
    claims: Claims = Field(default_factory=Claims)
    creditors_meeting: CreditorsMeeting = Field(default_factory=CreditorsMeeting)
    reports: Reports = Field(default_factory=Reports)
    compliance_flags: ComplianceFlags = Field(default_factory=ComplianceFlags)
    other_important_info: str = Field(default=NOT_FOUND)
    raw_json: str = Field(default="", description="Model output text, kept verbatim for audit")


class Company(SchemaModel):
    """A known company (debtor) that documents get attached to."""
    id: str = Field(..., description="Company identifier")
    name: str = Field(..., description="Company name")
    national_id: str = Field(default="", description="CUI / RO code as entered by the user")
    address: str = Field(default="")
    assigned_to: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)
    created_by: Optional[str] = None


class CompanyDraft(SchemaModel):
    """Prefilled values for creating a company from a scanned document."""
    name: str = ""
    national_id: str = ""
    address: str = ""


class AggregatedDeadline(SchemaModel):
    """A deadline collected across the documents of one case."""
    type: str = Field(default=DeadlineType.OTHER.value)
    date: DateValue = Field(default_factory=DateValue)
    time: str = Field(default=NOT_FOUND)
    legal_basis: str = Field(default=NOT_FOUND)
    notes: str = Field(default=NOT_FOUND)
    source_doc_id: Optional[str] = None


# Factories for section defaults. Each call returns a fresh instance.
def default_extraction(raw_json: str = "") -> ExtractionResult:
    """All-defaults record, used when the model returned nothing usable."""
    return ExtractionResult(raw_json=raw_json)


__all__ = [
    "NOT_FOUND",
    "Number",
    "DocumentType",
    "ProcedureType",
    "ProcedureStage",
    "DeadlineType",
    "CreditorType",
    "SchemaModel",
    "DateValue",
    "DocumentInfo",
    "Court",
    "Procedure",
    "ImportantDates",
    "CaseInfo",
    "Debtor",
    "Practitioner",
    "Parties",
    "Claims",
    "FeeApproved",
    "MeetingDecisions",
    "CreditorsMeeting",
    "AvoidanceReview",
    "LiabilityAssessment",
    "Financials",
    "Art97Report",
    "FinalArt167Report",
    "Reports",
    "ComplianceFlags",
    "ExtractionResult",
    "Company",
    "CompanyDraft",
    "AggregatedDeadline",
    "default_extraction",
]
