"""Unit tests for the pure field normalizers."""
import pytest

from services.sync.src.normalization import (
    SubjectNameFormatter,
    categorize_subject,
    determine_status,
    format_subject_name,
    normalize_date,
)
from shared.models.bill import BillStatus
from shared.models.subject import SubjectCategory


class TestNormalizeDate:

    def test_timestamp_with_offset(self):
        assert normalize_date("2025-02-19T05:00:00+00:00") == "2025-02-19"

    def test_bare_date(self):
        assert normalize_date("2020-01-15") == "2020-01-15"

    def test_none_and_empty(self):
        assert normalize_date(None) is None
        assert normalize_date("") is None

    def test_other_formats_are_parsed(self):
        assert normalize_date("February 19, 2025") == "2025-02-19"
        assert normalize_date("03/04/2021") == "2021-03-04"

    def test_malformed_passes_through(self):
        assert normalize_date("garbage") == "garbage"

    def test_non_string_passes_through(self):
        assert normalize_date(20250219) == 20250219
        assert normalize_date(["2025-02-19"]) == ["2025-02-19"]


class TestFormatSubjectName:

    def test_upper_snake_case(self):
        assert format_subject_name("PUBLIC_SAFETY") == "Public Safety"
        assert format_subject_name("HEALTH") == "HEALTH"

    def test_override_applied(self):
        assert format_subject_name("Lawenforcement") == "Law Enforcement"
        assert format_subject_name("californiascienceandhealth") == "California Science And Health"

    def test_override_keyed_on_formatted_name(self):
        # Casing splits this label before the lookup, so no override matches
        assert format_subject_name("CaliforniaScienceandHealth") == "California Scienceand Health"

    def test_camel_case(self):
        assert format_subject_name("lawEnforcement") == "Law Enforcement"
        assert format_subject_name("WaterQuality") == "Water Quality"

    def test_capital_run_before_word(self):
        assert format_subject_name("LAWEnforcement") == "LAW Enforcement"

    def test_unmapped_compound_falls_back(self):
        assert format_subject_name("Housingaffordability") == "Housingaffordability"

    def test_labels_canonicalizing_together(self):
        assert format_subject_name("PUBLIC_SAFETY") == format_subject_name("Publicsafety")

    def test_custom_overrides_extend_table(self):
        formatter = SubjectNameFormatter(overrides={"housingaffordability": "Housing Affordability"})
        assert formatter("Housingaffordability") == "Housing Affordability"
        # Custom table replaces the default one
        assert formatter("Lawenforcement") == "Lawenforcement"

    def test_idempotent(self):
        for label in ("PUBLIC_SAFETY", "Lawenforcement", "WaterQuality"):
            once = format_subject_name(label)
            assert format_subject_name(once) == once


class TestCategorizeSubject:

    @pytest.mark.parametrize(
        "label, expected",
        [
            ("PUBLIC_HEALTH", SubjectCategory.HEALTH),
            ("Higher Education", SubjectCategory.EDUCATION),
            ("ClimateChange", SubjectCategory.ENVIRONMENT),
            ("TAXATION", SubjectCategory.ECONOMY),
            ("Criminal Procedure", SubjectCategory.JUSTICE),
            ("Motor Vehicles", SubjectCategory.TRANSPORTATION),
            ("Elections", SubjectCategory.OTHER),
        ],
    )
    def test_categories(self, label, expected):
        assert categorize_subject(label) == expected

    def test_first_category_wins(self):
        # "school" (Education) and "tax" (Economy): Health/Education listed before Economy
        assert categorize_subject("School Tax Credits") == SubjectCategory.EDUCATION

    def test_empty(self):
        assert categorize_subject("") == SubjectCategory.OTHER


class TestDetermineStatus:

    def test_empty_is_introduced(self):
        assert determine_status(None) == BillStatus.INTRODUCED
        assert determine_status("") == BillStatus.INTRODUCED

    def test_signed_beats_committee(self):
        assert determine_status("Signed by Governor after committee review") == BillStatus.ENACTED

    def test_rules(self):
        assert determine_status("Chaptered and enacted") == BillStatus.ENACTED
        assert determine_status("Vetoed by Governor") == BillStatus.VETOED
        assert determine_status("Died in committee") == BillStatus.FAILED
        assert determine_status("Passed Senate 30-5") == BillStatus.PASSED_SENATE
        assert determine_status("Passed House of Representatives") == BillStatus.PASSED_HOUSE
        assert determine_status("Referred to Committee on Rules") == BillStatus.IN_COMMITTEE
        assert determine_status("Read first time") == BillStatus.INTRODUCED

    def test_senate_checked_before_house(self):
        assert determine_status("Passed House; sent to Senate") == BillStatus.PASSED_SENATE
