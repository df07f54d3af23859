"""Identifier-hierarchy resolution for Common Core standards documents.

Turns a standards XML document into a flat map of ResolutionRecords keyed by
identifier, then closes the map by synthesizing every ancestor that is
referenced but not present.

Usage:
    from ccss_import.hierarchy import (
        WebFetcher,
        extract_competencies_from_file,
        resolve_missing_ancestors,
    )

    flat = extract_competencies_from_file(Path("math.xml"))
    closed = resolve_missing_ancestors(flat, WebFetcher()).records
"""

from __future__ import annotations

from ccss_import.hierarchy.ancestors import (
    AncestorFailurePolicy,
    ResolutionResult,
    WebFetcher,
    find_missing_parents,
    resolve_missing_ancestors,
)
from ccss_import.hierarchy.errors import (
    AncestorSynthesisError,
    DocumentError,
    DocumentParseError,
    DocumentValidationError,
    FetchError,
    HeadingParseError,
)
from ccss_import.hierarchy.extractors import (
    extract_competencies,
    extract_competencies_from_file,
    parse_document,
)
from ccss_import.hierarchy.helpers import (
    derive_parent_idnumber,
    order_for_creation,
    url_to_code,
)
from ccss_import.hierarchy.models import FlatTree, ResolutionRecord

__all__ = [
    "AncestorFailurePolicy",
    "AncestorSynthesisError",
    "DocumentError",
    "DocumentParseError",
    "DocumentValidationError",
    "FetchError",
    "FlatTree",
    "HeadingParseError",
    "ResolutionRecord",
    "ResolutionResult",
    "WebFetcher",
    "derive_parent_idnumber",
    "extract_competencies",
    "extract_competencies_from_file",
    "find_missing_parents",
    "order_for_creation",
    "parse_document",
    "resolve_missing_ancestors",
    "url_to_code",
]
