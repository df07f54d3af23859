"""Persisted record shapes handed to the competency store.

These models drop the transient resolution fields (parentidnumber,
gradelevels) and carry the store-side references instead. Validation mirrors
the rules a competency store applies before accepting a record, so a
rejected record fails the same way whichever store is behind the importer.
"""

from __future__ import annotations

import html
import json
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from ccss_import.hierarchy.models import ResolutionRecord
from ccss_import.models.constants import (
    FORMAT_HTML,
    GRADE_LEVELS_LABEL,
    MAX_IDNUMBER_LENGTH,
    MAX_SHORTNAME_LENGTH,
    SYSTEM_CONTEXT_ID,
)

INVALID_SCALE_CONFIGURATION = "Invalid scale configuration"
SCALE_CONFIGURATION_REQUIRED = "The default rating and a proficient rating must be selected"


# -----------------------------------------------------------------------------
# Persisted records
# -----------------------------------------------------------------------------


class _PersistedRecord(BaseModel):
    """Fields shared by frameworks and competencies."""

    shortname: str = Field(..., max_length=MAX_SHORTNAME_LENGTH)
    idnumber: str = Field(..., max_length=MAX_IDNUMBER_LENGTH)
    description: str = ""
    descriptionformat: int = FORMAT_HTML

    @field_validator("shortname", "idnumber")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            msg = "must not be empty"
            raise ValueError(msg)
        return v


class FrameworkRecord(_PersistedRecord):
    """A competency framework as the store receives it."""

    scaleid: int = Field(..., gt=0)
    scaleconfiguration: str
    contextid: int = SYSTEM_CONTEXT_ID

    @model_validator(mode="after")
    def validate_scale_configuration(self) -> FrameworkRecord:
        try:
            config = json.loads(self.scaleconfiguration)
        except json.JSONDecodeError as e:
            raise ValueError(INVALID_SCALE_CONFIGURATION) from e

        if not isinstance(config, list) or not config or not isinstance(config[0], dict):
            raise ValueError(INVALID_SCALE_CONFIGURATION)

        try:
            configured_scale = int(config[0].get("scaleid"))
        except (TypeError, ValueError) as e:
            raise ValueError(INVALID_SCALE_CONFIGURATION) from e
        if configured_scale != self.scaleid:
            raise ValueError(INVALID_SCALE_CONFIGURATION)

        ratings = [item for item in config[1:] if isinstance(item, dict)]
        has_default = any(_is_selected(item.get("scaledefault")) for item in ratings)
        has_proficient = any(_is_selected(item.get("proficient")) for item in ratings)
        if not (has_default and has_proficient):
            raise ValueError(SCALE_CONFIGURATION_REQUIRED)

        return self


class CompetencyRecord(_PersistedRecord):
    """A competency as the store receives it. parentid 0 means top level."""

    competencyframeworkid: int = Field(..., gt=0)
    parentid: int = Field(default=0, ge=0)


@dataclass
class CreatedFramework:
    """Identifiers the store assigned to a new framework."""

    id: int
    idnumber: str


@dataclass
class CreatedCompetency:
    """Identifiers the store assigned to a new competency."""

    id: int
    idnumber: str


def _is_selected(value: Any) -> bool:
    return value in (1, "1", True)


# -----------------------------------------------------------------------------
# Mapping from resolution records
# -----------------------------------------------------------------------------


def to_framework_record(
    record: ResolutionRecord,
    scale_id: int,
    scale_configuration: str,
    context_id: int = SYSTEM_CONTEXT_ID,
) -> FrameworkRecord:
    """Promote the root resolution record to a framework.

    Raises:
        pydantic.ValidationError: If the result breaks the store's rules.
    """
    return FrameworkRecord(
        shortname=record.shortname,
        idnumber=record.idnumber,
        description=record.description,
        descriptionformat=FORMAT_HTML,
        scaleid=scale_id,
        scaleconfiguration=scale_configuration,
        contextid=context_id,
    )


def to_competency_record(
    record: ResolutionRecord,
    framework_id: int,
    parent_id: int | None = None,
) -> CompetencyRecord:
    """Map a resolution record to the competency the store creates.

    Grade levels, when present, are appended to the description as a
    labelled paragraph.

    Raises:
        pydantic.ValidationError: If the result breaks the store's rules.
    """
    description = record.description
    if record.gradelevels:
        description += f"<p>{GRADE_LEVELS_LABEL}{html.escape(record.gradelevels, quote=False)}</p>"

    return CompetencyRecord(
        shortname=record.shortname,
        idnumber=record.idnumber,
        description=description,
        descriptionformat=FORMAT_HTML,
        competencyframeworkid=framework_id,
        parentid=parent_id or 0,
    )


def format_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one readable line."""
    parts = []
    for item in error.errors():
        message = item["msg"].removeprefix("Value error, ")
        location = ".".join(str(part) for part in item["loc"])
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)
