"""In-memory record shape used while resolving the competency hierarchy.

A ResolutionRecord carries the two transient fields (parentidnumber and
gradelevels) that drive tree reconstruction. They never reach the store:
ccss_import.importer.models maps a ResolutionRecord onto the persisted
FrameworkRecord / CompetencyRecord shapes.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ResolutionRecord:
    """A competency node keyed by its slash-delimited identifier."""

    idnumber: str
    parentidnumber: str
    description: str
    shortname: str
    gradelevels: str = ""
    # True for ancestors built from a fetched page rather than the document
    synthesized: bool = False

    @property
    def is_root(self) -> bool:
        """Whether this node has no parent identifier."""
        return not self.parentidnumber


# Flat map of idnumber -> record, in document (insertion) order
FlatTree = dict[str, ResolutionRecord]
