"""Extract competency nodes from a Common Core standards XML document.

Each LearningStandardItem element becomes one ResolutionRecord keyed by its
RefURI. Element names are matched regardless of XML namespace.

Usage:
    from ccss_import.hierarchy.extractors import extract_competencies_from_file

    flat = extract_competencies_from_file(Path("math.xml"))
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from ccss_import.hierarchy.errors import DocumentParseError, DocumentValidationError
from ccss_import.hierarchy.helpers import (
    derive_parent_idnumber,
    join_values,
    statements_to_html,
)
from ccss_import.hierarchy.models import FlatTree, ResolutionRecord
from ccss_import.models.constants import (
    CODE_ELEMENT,
    GRADE_LEVEL_ELEMENT,
    IDNUMBER_ELEMENT,
    ITEM_ELEMENT,
    STATEMENT_ELEMENT,
)

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Document loading
# -----------------------------------------------------------------------------


def parse_document(data: bytes) -> ET.Element:
    """Parse a standards document.

    Args:
        data: Raw XML bytes.

    Returns:
        The document's root element.

    Raises:
        DocumentParseError: If the bytes are not well-formed XML or declare an
            encoding the parser cannot decode.
    """
    try:
        return ET.fromstring(data)
    except (ET.ParseError, LookupError, ValueError) as e:
        msg = f"Malformed standards document: {e}"
        raise DocumentParseError(msg) from e


def read_document(path: Path) -> ET.Element:
    """Read and parse a standards document from disk."""
    try:
        data = path.read_bytes()
    except OSError as e:
        msg = f"Cannot read standards document {path}: {e}"
        raise DocumentParseError(msg) from e
    return parse_document(data)


# -----------------------------------------------------------------------------
# Extraction
# -----------------------------------------------------------------------------


def _texts(element: ET.Element, name: str) -> list[str]:
    """Full text content of every descendant element called `name`."""
    return ["".join(child.itertext()) for child in element.iterfind(f".//{{*}}{name}")]


def extract_item(item: ET.Element, position: int) -> ResolutionRecord:
    """Build a ResolutionRecord from one LearningStandardItem element.

    Args:
        item: The LearningStandardItem element.
        position: 1-based position of the element, used in error messages.

    Raises:
        DocumentValidationError: If the item has no RefURI.
    """
    idnumbers = [text.strip() for text in _texts(item, IDNUMBER_ELEMENT)]
    if not idnumbers or not idnumbers[0]:
        msg = f"{ITEM_ELEMENT} #{position} has no {IDNUMBER_ELEMENT}"
        raise DocumentValidationError(msg)
    idnumber = idnumbers[0]

    return ResolutionRecord(
        idnumber=idnumber,
        parentidnumber=derive_parent_idnumber(idnumber),
        description=statements_to_html(_texts(item, STATEMENT_ELEMENT)),
        shortname=join_values(_texts(item, CODE_ELEMENT)),
        gradelevels=join_values(_texts(item, GRADE_LEVEL_ELEMENT)),
    )


def extract_competencies(root: ET.Element) -> FlatTree:
    """Extract every LearningStandardItem under `root` into a flat map.

    Later items with an identifier already seen replace the earlier record.

    Raises:
        DocumentValidationError: If an item lacks its identifier or the
            document contains no items at all.
    """
    flat: FlatTree = {}
    for position, item in enumerate(root.iterfind(f".//{{*}}{ITEM_ELEMENT}"), start=1):
        record = extract_item(item, position)
        if record.idnumber in flat:
            logger.debug("Duplicate identifier %s, keeping the later item", record.idnumber)
        flat[record.idnumber] = record

    if not flat:
        msg = f"No {ITEM_ELEMENT} elements found in standards document"
        raise DocumentValidationError(msg)

    return flat


def extract_competencies_from_file(path: Path) -> FlatTree:
    """Read a standards document and extract its flat competency map."""
    return extract_competencies(read_document(path))
