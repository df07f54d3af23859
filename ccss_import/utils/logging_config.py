"""Centralized logging configuration for the CLI and the API.

Both entry points call setup_logging() once at startup so per-file progress,
synthesized ancestors and import failures share one format.
"""

from __future__ import annotations

import logging

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Ancestor fetches would otherwise log every connection at DEBUG
QUIET_LOGGERS = ("urllib3", "charset_normalizer")


def setup_logging(verbose: bool = False, level: int | None = None) -> None:
    """Configure the root logger for an import run.

    Args:
        verbose: Log at DEBUG, which includes every synthesized ancestor and
            duplicate identifier. Takes precedence over `level`.
        level: Level to use when not verbose. Defaults to INFO.
    """
    if verbose:
        root_level = logging.DEBUG
    else:
        root_level = logging.INFO if level is None else level

    logging.basicConfig(level=root_level, format=DEFAULT_LOG_FORMAT, datefmt=DATE_FORMAT)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(root_level, logging.INFO))
