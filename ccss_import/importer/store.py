"""Competency store interface and an in-memory implementation.

The importer only needs two calls from a store: create a framework and
create a competency, each returning the store-assigned id. Any rejection is
reported as StoreValidationError.

InMemoryStore applies the same uniqueness and reference checks as the
database store and is used for dry runs and tests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from ccss_import.importer.models import (
    CompetencyRecord,
    CreatedCompetency,
    CreatedFramework,
    FrameworkRecord,
)

logger = logging.getLogger(__name__)


class StoreValidationError(Exception):
    """The store refused a record."""


class CompetencyStore(Protocol):
    """Protocol for competency stores the importer writes to."""

    def create_framework(self, record: FrameworkRecord) -> CreatedFramework:
        """Create a framework and return its assigned id."""
        ...

    def create_competency(self, record: CompetencyRecord) -> CreatedCompetency:
        """Create a competency and return its assigned id."""
        ...


@dataclass
class InMemoryStore:
    """Store that keeps created records in dictionaries keyed by id."""

    frameworks: dict[int, FrameworkRecord] = field(default_factory=dict)
    competencies: dict[int, CompetencyRecord] = field(default_factory=dict)
    _next_id: int = 1

    def _allocate_id(self) -> int:
        new_id = self._next_id
        self._next_id += 1
        return new_id

    def create_framework(self, record: FrameworkRecord) -> CreatedFramework:
        if any(f.idnumber == record.idnumber for f in self.frameworks.values()):
            msg = f"Framework idnumber '{record.idnumber}' is already taken"
            raise StoreValidationError(msg)

        framework_id = self._allocate_id()
        self.frameworks[framework_id] = record
        return CreatedFramework(id=framework_id, idnumber=record.idnumber)

    def create_competency(self, record: CompetencyRecord) -> CreatedCompetency:
        if record.competencyframeworkid not in self.frameworks:
            msg = f"Framework {record.competencyframeworkid} does not exist"
            raise StoreValidationError(msg)

        if record.parentid:
            parent = self.competencies.get(record.parentid)
            if parent is None or parent.competencyframeworkid != record.competencyframeworkid:
                msg = f"Parent competency {record.parentid} does not exist in this framework"
                raise StoreValidationError(msg)

        for existing in self.competencies.values():
            if (
                existing.competencyframeworkid == record.competencyframeworkid
                and existing.idnumber == record.idnumber
            ):
                msg = f"Competency idnumber '{record.idnumber}' is already taken"
                raise StoreValidationError(msg)

        competency_id = self._allocate_id()
        self.competencies[competency_id] = record
        return CreatedCompetency(id=competency_id, idnumber=record.idnumber)
