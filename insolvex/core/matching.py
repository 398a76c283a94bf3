"""Matching of extracted parties against known companies.

Two confidence tiers are used. An exact, collision-free national id (CUI)
match is authoritative and short-circuits everything else. Only when no id
matches does the fuzzy tier (name containment either way, or the company's
id appearing in the identifier text) run. An id shared by several companies
is left out of the exact tier. Any ambiguity yields None so the caller can
ask a human to pick.
"""
import logging
import re
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .coerce import is_not_found
from .models import NOT_FOUND, Company, CompanyDraft, ExtractionResult

logger = logging.getLogger(__name__)

# Shorter digit runs are usually house or room numbers.
_ID_CANDIDATE_RE = re.compile(r"\d{4,15}")
_NON_DIGIT_RE = re.compile(r"\D")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_for_match(value: Optional[str]) -> str:
    """Lowercase, collapse whitespace, trim."""
    return _WHITESPACE_RE.sub(" ", (value or "").lower()).strip()


def normalize_national_id(value: Optional[str]) -> str:
    """Digits of a CUI/RO code ("RO 12 345 678" -> "12345678"); sentinel -> ""."""
    if not value or value == NOT_FOUND:
        return ""
    return _NON_DIGIT_RE.sub("", value)


def extract_id_candidates(id_text: Optional[str]) -> List[str]:
    """Distinct 4-15 digit runs in ``id_text``, in order of first appearance."""
    if not id_text or id_text == NOT_FOUND:
        return []
    return list(dict.fromkeys(_ID_CANDIDATE_RE.findall(id_text)))


def _index_ids(companies: Iterable[Company]) -> Tuple[Dict[str, Company], Set[str]]:
    keyed = [(normalize_national_id(c.national_id), c) for c in companies]
    counts = Counter(key for key, _ in keyed if key)
    duplicated = {key for key, count in counts.items() if count > 1}
    index = {key: company for key, company in keyed if key and key not in duplicated}
    return index, duplicated


def build_id_index(companies: Iterable[Company]) -> Dict[str, Company]:
    """Map normalized national id -> company, leaving out duplicated ids."""
    index, _ = _index_ids(companies)
    return index


def _unique(companies: Iterable[Company]) -> List[Company]:
    seen = set()
    result = []
    for company in companies:
        if company.id in seen:
            continue
        seen.add(company.id)
        result.append(company)
    return result


def id_matches(companies: Sequence[Company], *id_texts: Optional[str]) -> Tuple[List[Company], bool]:
    """High-confidence tier.

    Returns the distinct companies whose id appears in any of the texts, and
    whether a text mentioned an id shared by several companies.
    """
    index, duplicated = _index_ids(companies)
    found = []
    hit_duplicate = False
    for id_text in id_texts:
        for candidate in extract_id_candidates(id_text):
            if candidate in duplicated:
                hit_duplicate = True
            company = index.get(candidate)
            if company is not None:
                found.append(company)
    if hit_duplicate:
        logger.debug("Identifier text mentions a national id shared by several companies")
    return _unique(found), hit_duplicate


def suggest_companies(
    companies: Sequence[Company], name: Optional[str], id_text: Optional[str]
) -> List[Company]:
    """Fuzzy tier: companies matching by name containment or by id in text.

    Returns an empty list when the extracted name is missing.
    """
    if is_not_found(name):
        return []
    extracted = normalize_for_match(name)
    if not extracted:
        return []
    id_lower = (id_text or "").lower()

    suggestions = []
    for company in companies:
        company_name = normalize_for_match(company.name)
        name_match = bool(company_name) and (company_name in extracted or extracted in company_name)
        raw_id = (company.national_id or "").strip().lower()
        id_match = bool(raw_id) and raw_id in id_lower
        if name_match or id_match:
            suggestions.append(company)
    return suggestions


def best_match(
    companies: Sequence[Company], extracted_name: Optional[str], extracted_id_text: Optional[str]
) -> Optional[Company]:
    """Single company for one extracted party, or None when absent or ambiguous."""
    if not companies or is_not_found(extracted_name):
        return None

    exact, _ = id_matches(companies, extracted_id_text)
    if len(exact) == 1:
        return exact[0]
    if len(exact) > 1:
        logger.debug("Ambiguous id match: %s", [c.id for c in exact])
        return None

    fuzzy = suggest_companies(companies, extracted_name, extracted_id_text)
    if len(fuzzy) == 1:
        return fuzzy[0]
    if len(fuzzy) > 1:
        logger.debug("Ambiguous name match for %r: %s", extracted_name, [c.id for c in fuzzy])
    return None


def best_match_two_sided(
    companies: Sequence[Company],
    first: Tuple[Optional[str], Optional[str]],
    second: Tuple[Optional[str], Optional[str]],
) -> Optional[Company]:
    """Single company for a document naming two parties.

    ``first`` and ``second`` are ``(name, id_text)`` pairs, e.g. beneficiary
    and contractor. Ids from both sides are pooled for the exact tier; the
    fuzzy tier is computed per side and reconciled.
    """
    if not companies:
        return None
    first_name, first_ids = first
    second_name, second_ids = second

    exact, _ = id_matches(companies, first_ids, second_ids)
    if len(exact) == 1:
        return exact[0]
    if len(exact) > 1:
        logger.debug("Ambiguous id match across parties: %s", [c.id for c in exact])
        return None

    first_suggestions = suggest_companies(companies, first_name, first_ids)
    second_suggestions = suggest_companies(companies, second_name, second_ids)

    second_ids_set = {c.id for c in second_suggestions}
    intersection = [c for c in first_suggestions if c.id in second_ids_set]
    if len(intersection) == 1:
        return intersection[0]

    if len(first_suggestions) == 1 and not second_suggestions:
        return first_suggestions[0]
    if len(second_suggestions) == 1 and not first_suggestions:
        return second_suggestions[0]
    if (
        len(first_suggestions) == 1
        and len(second_suggestions) == 1
        and first_suggestions[0].id == second_suggestions[0].id
    ):
        return first_suggestions[0]
    return None


def best_match_for_extraction(
    companies: Sequence[Company], extraction: ExtractionResult
) -> Optional[Company]:
    """best_match applied to the extracted debtor."""
    debtor = extraction.parties.debtor
    return best_match(companies, debtor.name, debtor.cui)


def search_companies(companies: Sequence[Company], query: Optional[str]) -> List[Company]:
    """Filter for the company picker: name or national id contains the query."""
    needle = normalize_for_match(query)
    if not needle:
        return list(companies)
    return [
        c for c in companies
        if needle in normalize_for_match(c.name)
        or (c.national_id and needle in c.national_id.lower())
    ]


def company_draft_from_extraction(extraction: ExtractionResult) -> CompanyDraft:
    """Prefill for "create company from scan"; sentinels become empty strings."""
    debtor = extraction.parties.debtor

    def _clean(value: str) -> str:
        return "" if is_not_found(value) else value.strip()

    return CompanyDraft(
        name=_clean(debtor.name),
        national_id=_clean(debtor.cui),
        address=_clean(debtor.address),
    )
