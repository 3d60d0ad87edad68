"""
Unit Tests for Student Profile Section Validation

Covers field rules, cross-field rules and the profile-completion rule.
"""

from typing import Any

import pytest

from schoolcounsel.core.errors import ValidationError
from schoolcounsel.core.models import ProfileSection
from schoolcounsel.core.validation import current_year, validate_payload
from schoolcounsel.profile import SECTION_SCHEMAS, derive_profile_complete
from schoolcounsel.profile.sections import (
    EducationalBackgroundSection,
    FamilyBackgroundSection,
    FamilyStructureSection,
    NotesSection,
    PersonalDataSection,
)


def fields_of(exc: ValidationError) -> list[str]:
    return [v.field for v in exc.violations]


class TestPersonalData:
    def test_valid_payload(self, personal_data_payload: dict[str, Any]) -> None:
        model = validate_payload(PersonalDataSection, personal_data_payload)

        document = model.to_document()
        assert document["lastName"] == "Nwosu"
        assert document["dateOfBirth"] == "2009-04-12"

    def test_surname_is_accepted_as_last_name(self, personal_data_payload: dict[str, Any]) -> None:
        payload = dict(personal_data_payload)
        payload["surname"] = payload.pop("lastName")

        model = validate_payload(PersonalDataSection, payload)

        assert model.last_name == "Nwosu"

    def test_reports_every_missing_field(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_payload(PersonalDataSection, {"firstName": "Chidi"})

        missing = set(fields_of(exc_info.value))
        assert {"lastName", "gender", "admissionNumber", "religion", "nationality"} <= missing
        assert "firstName" not in missing

    def test_gender_enumeration(self, personal_data_payload: dict[str, Any]) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_payload(PersonalDataSection, {**personal_data_payload, "gender": "M"})

        assert fields_of(exc_info.value) == ["gender"]

    @pytest.mark.parametrize("year", [1899, current_year() + 1])
    def test_year_of_admission_range(
        self, personal_data_payload: dict[str, Any], year: int
    ) -> None:
        payload = {**personal_data_payload, "yearOfAdmission": year}

        with pytest.raises(ValidationError) as exc_info:
            validate_payload(PersonalDataSection, payload)

        assert fields_of(exc_info.value) == ["yearOfAdmission"]

    def test_invalid_date_of_birth(self, personal_data_payload: dict[str, Any]) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_payload(
                PersonalDataSection, {**personal_data_payload, "dateOfBirth": "2009-13-45"}
            )

        assert fields_of(exc_info.value) == ["dateOfBirth"]

    def test_change_of_name_needs_date(self, personal_data_payload: dict[str, Any]) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_payload(
                PersonalDataSection, {**personal_data_payload, "changeOfName": "Chidi Obi"}
            )

        assert fields_of(exc_info.value) == ["changeOfNameDate"]

    def test_change_of_name_with_date(self, personal_data_payload: dict[str, Any]) -> None:
        payload = {
            **personal_data_payload,
            "changeOfName": "Chidi Obi",
            "changeOfNameDate": "2021-06-01",
        }

        assert validate_payload(PersonalDataSection, payload).change_of_name == "Chidi Obi"

    def test_change_of_name_rule_runs_alongside_missing_fields(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_payload(
                PersonalDataSection, {"firstName": "Chidi", "changeOfName": "Chidi Okoro"}
            )

        fields = fields_of(exc_info.value)
        assert {"lastName", "religion", "changeOfNameDate"} <= set(fields)
        assert fields[-1] == "changeOfNameDate"

    def test_blank_strings_count_as_missing(self, personal_data_payload: dict[str, Any]) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_payload(PersonalDataSection, {**personal_data_payload, "religion": "   "})

        assert fields_of(exc_info.value) == ["religion"]


class TestFamilyBackground:
    def test_one_parent_is_enough(self, family_background_payload: dict[str, Any]) -> None:
        payload = {"guardian": family_background_payload["father"]}

        model = validate_payload(FamilyBackgroundSection, payload)

        assert model.guardian is not None
        assert model.father is None

    def test_requires_at_least_one_parent(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_payload(FamilyBackgroundSection, {})

        assert fields_of(exc_info.value) == ["familyBackground"]

    def test_parent_record_fields_are_required(
        self, family_background_payload: dict[str, Any]
    ) -> None:
        father = dict(family_background_payload["father"])
        del father["occupation"]
        del father["deceased"]

        with pytest.raises(ValidationError) as exc_info:
            validate_payload(FamilyBackgroundSection, {"father": father})

        assert sorted(fields_of(exc_info.value)) == ["father.deceased", "father.occupation"]


class TestFamilyStructure:
    def test_valid_payload(self, family_structure_payload: dict[str, Any]) -> None:
        model = validate_payload(FamilyStructureSection, family_structure_payload)

        assert model.total_siblings == 3

    def test_sibling_sum_mismatch(self, family_structure_payload: dict[str, Any]) -> None:
        payload = {
            **family_structure_payload,
            "totalSiblings": 5,
            "maleSiblings": 2,
            "femaleSiblings": 2,
        }

        with pytest.raises(ValidationError) as exc_info:
            validate_payload(FamilyStructureSection, payload)

        violation = exc_info.value.violations[0]
        assert violation.field == "totalSiblings"
        assert "sum of male and female" in violation.message

    def test_position_beyond_total(self, family_structure_payload: dict[str, Any]) -> None:
        payload = {
            **family_structure_payload,
            "positionAmongSiblings": 4,
            "totalSiblings": 3,
            "maleSiblings": 1,
            "femaleSiblings": 2,
        }

        with pytest.raises(ValidationError) as exc_info:
            validate_payload(FamilyStructureSection, payload)

        assert fields_of(exc_info.value) == ["positionAmongSiblings"]

    def test_both_cross_field_rules_reported_together(
        self, family_structure_payload: dict[str, Any]
    ) -> None:
        payload = {
            **family_structure_payload,
            "totalSiblings": 2,
            "maleSiblings": 2,
            "femaleSiblings": 2,
            "positionAmongSiblings": 3,
        }

        with pytest.raises(ValidationError) as exc_info:
            validate_payload(FamilyStructureSection, payload)

        assert fields_of(exc_info.value) == ["totalSiblings", "positionAmongSiblings"]

    def test_cross_field_rules_reported_with_field_errors(
        self, family_structure_payload: dict[str, Any]
    ) -> None:
        payload = {
            **family_structure_payload,
            "totalSiblings": 5,
            "maleSiblings": 2,
            "femaleSiblings": 2,
            "positionAmongSiblings": 1,
        }
        del payload["parentsStatus"]

        with pytest.raises(ValidationError) as exc_info:
            validate_payload(FamilyStructureSection, payload)

        assert fields_of(exc_info.value) == ["parentsStatus", "totalSiblings"]

    def test_cross_field_rules_skipped_when_their_fields_fail(
        self, family_structure_payload: dict[str, Any]
    ) -> None:
        payload = {
            **family_structure_payload,
            "totalSiblings": 5,
            "maleSiblings": -1,
            "femaleSiblings": 2,
        }

        with pytest.raises(ValidationError) as exc_info:
            validate_payload(FamilyStructureSection, payload)

        assert fields_of(exc_info.value) == ["maleSiblings"]

    @pytest.mark.parametrize(
        "field,value",
        [
            ("fatherWives", 0),
            ("maleSiblings", -1),
            ("positionAmongSiblings", 0),
            ("motherPosition", "Fifth Wife"),
            ("parentsStatus", "Unknown"),
        ],
    )
    def test_field_rules(
        self, family_structure_payload: dict[str, Any], field: str, value: Any
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_payload(FamilyStructureSection, {**family_structure_payload, field: value})

        assert field in fields_of(exc_info.value)


class TestEducationalBackground:
    def test_valid_payload(self, educational_background_payload: dict[str, Any]) -> None:
        model = validate_payload(EducationalBackgroundSection, educational_background_payload)

        document = model.to_document()
        assert document["schools"]["juniorSecondary"]["graduationYear"] == 2023
        assert document["schools"]["seniorSecondary"]["schoolName"] is None

    def test_admission_after_graduation(self) -> None:
        payload = {"schools": {"primary": {"admissionYear": 2020, "graduationYear": 2014}}}

        with pytest.raises(ValidationError) as exc_info:
            validate_payload(EducationalBackgroundSection, payload)

        violation = exc_info.value.violations[0]
        assert violation.field == "schools.primary.admissionYear"
        assert violation.message.startswith("Primary School:")

    def test_only_first_offending_level_reported(self) -> None:
        payload = {
            "schools": {
                "juniorSecondary": {"admissionYear": 1850},
                "seniorSecondary": {"admissionYear": 2024, "graduationYear": 2020},
            }
        }

        with pytest.raises(ValidationError) as exc_info:
            validate_payload(EducationalBackgroundSection, payload)

        assert fields_of(exc_info.value) == ["schools.juniorSecondary.admissionYear"]

    def test_future_graduation_year(self) -> None:
        payload = {"schools": {"seniorSecondary": {"graduationYear": current_year() + 2}}}

        with pytest.raises(ValidationError) as exc_info:
            validate_payload(EducationalBackgroundSection, payload)

        assert fields_of(exc_info.value) == ["schools.seniorSecondary.graduationYear"]

    def test_empty_payload_is_valid(self) -> None:
        validate_payload(EducationalBackgroundSection, {})


class TestNotes:
    def test_free_form(self) -> None:
        model = validate_payload(NotesSection, {"additionalNotes": "Enjoys chess"})

        assert model.to_document() == {"additionalNotes": "Enjoys chess", "counselorNotes": None}


class TestProfileCompletion:
    def test_every_section_has_a_schema(self) -> None:
        assert set(SECTION_SCHEMAS) == set(ProfileSection)

    def test_complete_when_four_gating_sections_done(self) -> None:
        status = {
            "personalData": True,
            "familyBackground": True,
            "familyStructure": True,
            "educationalBackground": True,
            "notes": False,
        }

        assert derive_profile_complete(status) is True

    @pytest.mark.parametrize(
        "missing",
        ["personalData", "familyBackground", "familyStructure", "educationalBackground"],
    )
    def test_incomplete_when_any_gating_section_missing(self, missing: str) -> None:
        status = {section.value: True for section in ProfileSection}
        status[missing] = False

        assert derive_profile_complete(status) is False

    def test_notes_alone_does_not_complete(self) -> None:
        assert derive_profile_complete({"notes": True}) is False
