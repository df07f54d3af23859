"""Shared utilities package for the ccss-import application."""

from ccss_import.utils.logging_config import setup_logging
from ccss_import.utils.paths import STANDARDS_DATA_DIR, get_standards_file

__all__ = [
    # Logging utilities
    "setup_logging",
    # Paths
    "STANDARDS_DATA_DIR",
    "get_standards_file",
]
