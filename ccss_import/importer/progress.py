"""Progress reporting for import runs.

The importer drives a ProgressSink with a fixed budget of ticks per file.
LoggingProgress is the default for the CLI and API; NullProgress discards
everything.
"""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class ProgressSink(Protocol):
    """Protocol for progress reporters."""

    def start(self, label: str, total_ticks: int) -> None:
        """Begin a unit of work that will report `total_ticks` ticks."""
        ...

    def tick(self) -> None:
        """Report one completed step."""
        ...

    def end(self) -> None:
        """Finish the current unit of work."""
        ...


class NullProgress:
    """Progress sink that reports nothing."""

    def start(self, label: str, total_ticks: int) -> None:
        pass

    def tick(self) -> None:
        pass

    def end(self) -> None:
        pass


class LoggingProgress:
    """Progress sink that logs each tick as `label: n/total`."""

    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger
        self.label = ""
        self.total = 0
        self.done = 0

    def start(self, label: str, total_ticks: int) -> None:
        self.label = label
        self.total = total_ticks
        self.done = 0
        self.log.info("%s: started", label)

    def tick(self) -> None:
        self.done = min(self.done + 1, self.total)
        self.log.info("%s: %d/%d", self.label, self.done, self.total)

    def end(self) -> None:
        self.log.info("%s: finished (%d/%d)", self.label, self.done, self.total)
