"""Models package for shared constants."""

from ccss_import.models.constants import (
    CCSS_ORIGIN,
    CODE_TAG,
    DEFAULT_SOURCES,
    FORMAT_HTML,
    ROOT_SEPARATOR_THRESHOLD,
)

__all__ = [
    "CCSS_ORIGIN",
    "CODE_TAG",
    "DEFAULT_SOURCES",
    "FORMAT_HTML",
    "ROOT_SEPARATOR_THRESHOLD",
]
