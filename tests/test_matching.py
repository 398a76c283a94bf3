"""Tests for matching extracted parties against known companies."""
import pytest

from insolvex.core.matching import (
    best_match,
    best_match_for_extraction,
    best_match_two_sided,
    build_id_index,
    company_draft_from_extraction,
    extract_id_candidates,
    id_matches,
    normalize_for_match,
    normalize_national_id,
    search_companies,
    suggest_companies,
)
from insolvex.core.models import NOT_FOUND, Company, CompanyDraft
from insolvex.core.normalizer import normalize_extraction


def _company(company_id, name, national_id=""):
    return Company(id=company_id, name=name, national_id=national_id)


class TestNormalization:

    def test_normalize_for_match(self):
        assert normalize_for_match("  Alfa   CONSTRUCT\tSRL ") == "alfa construct srl"
        assert normalize_for_match(None) == ""

    @pytest.mark.parametrize("raw,expected", [
        ("RO 12 345 678", "12345678"),
        ("RO12345678", "12345678"),
        (NOT_FOUND, ""),
        ("", ""),
        (None, ""),
    ])
    def test_normalize_national_id(self, raw, expected):
        assert normalize_national_id(raw) == expected

    def test_extract_id_candidates(self):
        text = "CUI RO 12345678, J12/345/2010, nr. 10, cod 12345678, tel 0264123456"
        assert extract_id_candidates(text) == ["12345678", "2010", "0264123456"]
        assert extract_id_candidates(NOT_FOUND) == []
        assert extract_id_candidates(None) == []

    def test_build_id_index_leaves_out_duplicates(self):
        companies = [
            _company("a", "A", "RO 111111"),
            _company("b", "B", "111111"),
            _company("c", "C", "222222"),
            _company("d", "D", ""),
        ]
        assert list(build_id_index(companies)) == ["222222"]


class TestBestMatch:

    def test_exact_id_beats_fuzzy_name(self):
        """The id match wins even when the name points at another company."""
        companies = [_company("first", "Alfa Construct SRL", "12345678"),
                     _company("second", "Beta Trans SRL", "87654321")]
        match = best_match(companies, "BETA TRANS SRL", "CUI: RO 12345678")
        assert match is not None
        assert match.id == "first"

    def test_shared_id_fails_closed(self):
        companies = [_company("a", "Alfa SRL", "RO 12345678"),
                     _company("b", "Alfa Impex SRL", "12345678")]
        assert best_match(companies, "Alfa SRL", "RO 12345678") is None

    def test_shared_id_falls_through_to_name(self):
        companies = [_company("a", "Alpha Construct SRL", "RO 12345678"),
                     _company("b", "Beta Trans SRL", "12.345.678")]
        match = best_match(companies, "Alpha Construct SRL", "CUI 12345678")
        assert match.id == "a"

    def test_two_distinct_ids_fail_closed(self):
        companies = [_company("a", "Alfa SRL", "11111111"),
                     _company("b", "Beta SRL", "22222222")]
        assert best_match(companies, "Alfa SRL", "11111111 / 22222222") is None

    def test_fuzzy_name_containment(self):
        companies = [_company("a", "Alfa Construct", "11111111"),
                     _company("b", "Beta Trans SRL", "22222222")]
        match = best_match(companies, "SC ALFA CONSTRUCT SRL", NOT_FOUND)
        assert match.id == "a"

    def test_fuzzy_ambiguous_returns_none(self):
        companies = [_company("a", "Alfa"), _company("b", "Alfa Construct")]
        assert best_match(companies, "Alfa Construct SRL", None) is None

    def test_fuzzy_id_in_text(self):
        """A company id found verbatim in the text matches at the fuzzy tier."""
        companies = [_company("a", "Alfa SRL", "RO-77"), _company("b", "Beta SRL", "RO-88")]
        assert best_match(companies, "Gamma SRL", "cod ro-77").id == "a"

    @pytest.mark.parametrize("name", [NOT_FOUND, "", None])
    def test_missing_name_returns_none(self, name, companies):
        assert best_match(companies, name, "RO 12345678") is None

    def test_no_companies(self):
        assert best_match([], "Alfa", "12345678") is None

    def test_nameless_company_never_matches_by_name(self):
        companies = [_company("a", "   "), _company("b", "Beta SRL")]
        assert best_match(companies, "Beta SRL", None).id == "b"

    def test_id_matches_reports_duplicates(self):
        companies = [_company("a", "A", "1234"), _company("b", "B", "1234"), _company("c", "C", "5678")]
        found, hit_duplicate = id_matches(companies, "1234 5678")
        assert [c.id for c in found] == ["c"]
        assert hit_duplicate is True


class TestTwoSided:

    def test_pooled_ids(self):
        companies = [_company("a", "Alfa SRL", "11111111"), _company("b", "Beta SRL", "22222222")]
        match = best_match_two_sided(companies, ("Gamma", NOT_FOUND), ("Delta", "CUI 22222222"))
        assert match.id == "b"

    def test_ids_on_both_sides_are_ambiguous(self):
        companies = [_company("a", "Alfa SRL", "11111111"), _company("b", "Beta SRL", "22222222")]
        assert best_match_two_sided(companies, ("Alfa", "11111111"), ("Beta", "22222222")) is None

    def test_shared_id_falls_through_to_names(self):
        companies = [_company("a", "Alfa SRL", "RO 12345678"), _company("b", "Beta SRL", "12.345.678")]
        match = best_match_two_sided(companies, ("Alfa SRL", "CUI 12345678"), ("Gamma", NOT_FOUND))
        assert match.id == "a"

    def test_intersection(self):
        companies = [_company("a", "Alfa Construct"), _company("b", "Alfa"), _company("c", "Construct Grup")]
        # first side suggests a and b, second suggests a and c
        match = best_match_two_sided(companies, ("Alfa Construct SRL", None), ("Construct", None))
        assert match.id == "a"

    def test_single_side(self):
        companies = [_company("a", "Alfa SRL"), _company("b", "Beta SRL")]
        match = best_match_two_sided(companies, (NOT_FOUND, None), ("Beta SRL", None))
        assert match.id == "b"

    def test_sides_disagree(self):
        companies = [_company("a", "Alfa SRL"), _company("b", "Beta SRL")]
        assert best_match_two_sided(companies, ("Alfa SRL", None), ("Beta SRL", None)) is None

    def test_sides_agree(self):
        companies = [_company("a", "Alfa SRL"), _company("b", "Beta SRL")]
        assert best_match_two_sided(companies, ("Alfa SRL", None), ("ALFA  srl", None)).id == "a"


class TestExtractionHelpers:

    def test_best_match_for_extraction(self, companies, legacy_raw):
        extraction = normalize_extraction(legacy_raw)
        assert best_match_for_extraction(companies, extraction).id == "c-alfa"

    def test_suggest_companies(self, companies):
        assert [c.id for c in suggest_companies(companies, "beta trans", None)] == ["c-beta"]
        assert suggest_companies(companies, NOT_FOUND, "87654321") == []

    def test_search_companies(self, companies):
        assert search_companies(companies, "") == companies
        assert search_companies(companies, None) == companies
        assert [c.id for c in search_companies(companies, "GAMMA")] == ["c-gamma"]
        assert [c.id for c in search_companies(companies, "ro1234")] == ["c-alfa"]

    def test_company_draft(self, legacy_raw):
        draft = company_draft_from_extraction(normalize_extraction(legacy_raw))
        assert draft == CompanyDraft(
            name="ALFA CONSTRUCT SRL",
            national_id="RO 12345678",
            address="Str. Memorandumului nr. 10, Cluj-Napoca",
        )

    def test_company_draft_from_empty_extraction(self):
        draft = company_draft_from_extraction(normalize_extraction({}))
        assert draft == CompanyDraft(name="", national_id="", address="")
