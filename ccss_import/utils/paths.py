"""Centralized path constants for the application.

Usage:
    from ccss_import.utils.paths import STANDARDS_DATA_DIR

    math_file = STANDARDS_DATA_DIR / "math.xml"

    # Or resolve against a custom data directory
    math_file = get_standards_file("math.xml", data_dir=Path("/srv/ccss"))
"""

from __future__ import annotations

from pathlib import Path

# -----------------------------------------------------------------------------
# Root directories
# -----------------------------------------------------------------------------

# This file is at: ccss_import/utils/paths.py
# So parents[2] gets us to repo root
REPO_ROOT = Path(__file__).resolve().parents[2]

PACKAGE_DIR = REPO_ROOT / "ccss_import"

DATA_DIR = PACKAGE_DIR / "data"

# Downloaded Common Core XML documents (math.xml, ela-literacy.xml)
STANDARDS_DATA_DIR = DATA_DIR / "standards"


# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------


def get_standards_file(filename: str, data_dir: Path | None = None) -> Path:
    """Get the path to a standards XML file.

    Args:
        filename: File name, e.g. "math.xml".
        data_dir: Directory holding the documents. Defaults to STANDARDS_DATA_DIR.

    Returns:
        Path to the standards file (not checked for existence).
    """
    return (data_dir or STANDARDS_DATA_DIR) / filename
