"""Shared constants for the ccss-import application.

This module centralizes constants used across the hierarchy resolver and the
importer so both sides agree on identifier rules and source layout.

Constants defined here:
- Identifier separators and the root threshold
- Well-known Common Core origins and the short code tag
- XML element names in the standards documents
- Default standards sources (one framework per file)
"""

from __future__ import annotations

# -----------------------------------------------------------------------------
# Identifier Constants
# -----------------------------------------------------------------------------

IDNUMBER_SEPARATOR = "/"

# Identifiers with this many separators or fewer are framework roots
ROOT_SEPARATOR_THRESHOLD = 4

CCSS_ORIGIN = "http://corestandards.org"

CCSS_ORIGINS = (
    CCSS_ORIGIN,
    "https://corestandards.org",
    "http://www.corestandards.org",
    "https://www.corestandards.org",
)

CODE_TAG = "CCSS"
CODE_SEPARATOR = "."


# -----------------------------------------------------------------------------
# Standards Document Constants
# -----------------------------------------------------------------------------

ITEM_ELEMENT = "LearningStandardItem"
IDNUMBER_ELEMENT = "RefURI"
STATEMENT_ELEMENT = "Statement"
CODE_ELEMENT = "StatementCode"
GRADE_LEVEL_ELEMENT = "GradeLevel"

HEADING_ELEMENT = "h1"


# -----------------------------------------------------------------------------
# Persisted Record Constants
# -----------------------------------------------------------------------------

FORMAT_HTML = 1

SYSTEM_CONTEXT_ID = 1

MAX_SHORTNAME_LENGTH = 100
MAX_IDNUMBER_LENGTH = 100

GRADE_LEVELS_LABEL = "<strong>Grade levels</strong><br/>"


# -----------------------------------------------------------------------------
# Default Sources
# -----------------------------------------------------------------------------

# Standards domain name -> file name under the data directory
DEFAULT_SOURCES = {
    "Math": "math.xml",
    "ELA-Literacy": "ela-literacy.xml",
}

PROGRESS_TICKS_PER_FILE = 4
