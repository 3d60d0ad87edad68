"""
Unit Tests for Assessment Section Schemas and Workflow Helpers
"""

from typing import Any

import pytest

from schoolcounsel.assessment import (
    SECTION_SCHEMAS,
    default_sections,
    has_mandatory_section,
    parse_section,
)
from schoolcounsel.core.errors import InvalidSection, ValidationError
from schoolcounsel.core.models import Assessment, AssessmentSection
from schoolcounsel.core.validation import validate_payload


def new_assessment() -> Assessment:
    assessment = Assessment(status="ongoing", overall_remark={"remark": ""})
    for section, document in default_sections().items():
        assessment.set_section(section, document)
    return assessment


class TestParseSection:
    def test_known_names(self) -> None:
        assert parse_section("standardizedTests") is AssessmentSection.STANDARDIZED_TESTS
        assert parse_section("vocationalInterests") is AssessmentSection.VOCATIONAL_INTERESTS

    @pytest.mark.parametrize("name", ["", "standardized_tests", "overallRemark", "notes"])
    def test_unknown_names(self, name: str) -> None:
        with pytest.raises(InvalidSection, match="Invalid section specified"):
            parse_section(name)


class TestDefaults:
    def test_every_section_has_schema_and_default(self) -> None:
        assert set(SECTION_SCHEMAS) == set(AssessmentSection)
        assert set(default_sections()) == set(AssessmentSection)

    def test_defaults_are_fresh_copies(self) -> None:
        first = default_sections()
        first[AssessmentSection.STANDARDIZED_TESTS]["tests"].append({"testName": "x"})

        assert default_sections()[AssessmentSection.STANDARDIZED_TESTS]["tests"] == []


class TestMandatorySection:
    def test_new_assessment_lacks_tests(self) -> None:
        assert has_mandatory_section(new_assessment()) is False

    def test_status_without_tests(self) -> None:
        assessment = new_assessment()
        assessment.set_section(AssessmentSection.STANDARDIZED_TESTS, {"status": True, "tests": []})

        assert has_mandatory_section(assessment) is False

    def test_tests_without_status(self, standardized_test_entry: dict[str, Any]) -> None:
        assessment = new_assessment()
        assessment.set_section(
            AssessmentSection.STANDARDIZED_TESTS,
            {"status": False, "tests": [standardized_test_entry]},
        )

        assert has_mandatory_section(assessment) is False

    def test_status_and_one_test(self, standardized_test_entry: dict[str, Any]) -> None:
        assessment = new_assessment()
        assessment.set_section(
            AssessmentSection.STANDARDIZED_TESTS,
            {"status": True, "tests": [standardized_test_entry]},
        )

        assert has_mandatory_section(assessment) is True


class TestSectionSchemas:
    def test_partial_update_keeps_only_sent_keys(self) -> None:
        schema = SECTION_SCHEMAS[AssessmentSection.PHYSICAL_DEVELOPMENT]

        update = validate_payload(schema, {"height": 162.5})

        assert update.to_document(exclude_unset=True) == {"height": 162.5}

    def test_standardized_test_entry_validated(
        self, standardized_test_entry: dict[str, Any]
    ) -> None:
        schema = SECTION_SCHEMAS[AssessmentSection.STANDARDIZED_TESTS]
        entry = dict(standardized_test_entry)
        del entry["interpretation"]

        with pytest.raises(ValidationError) as exc_info:
            validate_payload(schema, {"status": True, "tests": [entry]})

        assert [v.field for v in exc_info.value.violations] == ["tests.0.interpretation"]

    @pytest.mark.parametrize("rating", [0, 6])
    def test_observation_ratings_range(self, rating: int) -> None:
        schema = SECTION_SCHEMAS[AssessmentSection.OBSERVATIONS]

        with pytest.raises(ValidationError) as exc_info:
            validate_payload(schema, {"punctuality": rating})

        assert [v.field for v in exc_info.value.violations] == ["punctuality"]

    def test_discipline_record_round_trips_dates(self) -> None:
        schema = SECTION_SCHEMAS[AssessmentSection.DISCIPLINE_RECORDS]

        update = validate_payload(
            schema,
            {
                "status": True,
                "records": [
                    {"date": "2026-02-10", "offence": "Truancy", "actionTaken": "Warning"}
                ],
            },
        )

        document = update.to_document(exclude_unset=True)
        assert document["records"][0] == {
            "date": "2026-02-10",
            "offence": "Truancy",
            "actionTaken": "Warning",
        }
