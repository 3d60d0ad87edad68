"""
Declarative payload validation.

Every section payload is checked the same way:
1. Parse the raw body with the section's Pydantic schema (field presence,
   types, enumerations, ranges). Pydantic reports every failing field at once.
2. Run the schema's cross-field rules and collect every violation they
   return. When some fields failed in step 1, a rule still runs provided every
   field it reads (``cross_field_inputs``) parsed.
3. Raise one ``ValidationError`` carrying the full violation list, or return
   the parsed model.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Annotated, Any, ClassVar, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic.alias_generators import to_camel

from schoolcounsel.core.errors import ValidationError, Violation

MIN_YEAR = 1900

SchemaT = TypeVar("SchemaT", bound="SectionSchema")


class CamelModel(BaseModel):
    """Base for API models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


class SectionSchema(CamelModel):
    """A section payload schema with optional cross-field rules."""

    # Fields read by cross_field_violations
    cross_field_inputs: ClassVar[frozenset[str]] = frozenset()

    def cross_field_violations(self) -> list[Violation]:
        return []

    def to_document(self, exclude_unset: bool = False) -> dict[str, Any]:
        """Serialise for storage (camelCase, JSON-safe)."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=exclude_unset)


def current_year() -> int:
    return datetime.now(UTC).year


def year_in_range(year: int) -> bool:
    return MIN_YEAR <= year <= current_year()


def violations_from_pydantic(exc: pydantic.ValidationError) -> list[Violation]:
    """Flatten Pydantic errors into ``field.path: message`` violations."""
    violations = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "body"
        if error["type"] == "missing":
            message = f"{field} is required"
        else:
            message = error["msg"]
        violations.append(Violation(field=field, message=message))
    return violations


def _parsed_rule_inputs(
    schema: type[SectionSchema], payload: Mapping[str, Any], failed: set[str]
) -> dict[str, Any] | None:
    """Parsed values of ``schema.cross_field_inputs``, or None if any failed."""
    values: dict[str, Any] = {}
    for name in schema.cross_field_inputs:
        info = schema.model_fields[name]
        alias = info.alias or name
        if alias in failed or name in failed:
            return None
        if alias in payload:
            raw = payload[alias]
        elif name in payload:
            raw = payload[name]
        else:
            values[name] = info.get_default(call_default_factory=True)
            continue
        annotation = (
            Annotated[info.annotation, *info.metadata] if info.metadata else info.annotation
        )
        # Models carry their own config; plain types take the schema's
        is_model = isinstance(info.annotation, type) and issubclass(info.annotation, BaseModel)
        adapter = TypeAdapter(annotation, config=None if is_model else schema.model_config)
        try:
            values[name] = adapter.validate_python(raw)
        except pydantic.ValidationError:
            return None
    return values


def cross_field_violations_of_valid_fields(
    schema: type[SectionSchema], payload: Any, exc: pydantic.ValidationError
) -> list[Violation]:
    """Run the cross-field rules of a payload that failed field validation.

    The rules only run when every field they read parsed cleanly.
    """
    if not schema.cross_field_inputs or not isinstance(payload, Mapping):
        return []

    failed = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
    values = _parsed_rule_inputs(schema, payload, failed)
    if values is None:
        return []
    return schema.model_construct(**values).cross_field_violations()


def validate_payload(schema: type[SchemaT], payload: Any) -> SchemaT:
    """Parse ``payload`` with ``schema`` and apply its cross-field rules.

    Raises:
        ValidationError: listing every violated field
    """
    try:
        model = schema.model_validate(payload)
    except pydantic.ValidationError as e:
        violations = violations_from_pydantic(e)
        violations.extend(cross_field_violations_of_valid_fields(schema, payload, e))
        raise ValidationError(violations=violations) from e

    violations = model.cross_field_violations()
    if violations:
        raise ValidationError(violations=violations)
    return model
