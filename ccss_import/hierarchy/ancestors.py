"""Synthesize ancestor nodes that are referenced but absent from a document.

Standards documents list the leaf standards and only some of their
groupings. Every identifier is a live URI on corestandards.org, so a missing
parent is rebuilt from the page it names: the page's first <h1> becomes the
description and the URI path becomes the short code.

Usage:
    from ccss_import.hierarchy.ancestors import WebFetcher, resolve_missing_ancestors

    result = resolve_missing_ancestors(flat, WebFetcher(timeout=15))
    closed = result.records
"""

from __future__ import annotations

import html
import logging
from collections import deque
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum

import requests
from bs4 import BeautifulSoup

from ccss_import.hierarchy.errors import (
    AncestorSynthesisError,
    FetchError,
    HeadingParseError,
)
from ccss_import.hierarchy.helpers import derive_parent_idnumber, url_to_code
from ccss_import.hierarchy.models import FlatTree, ResolutionRecord
from ccss_import.models.constants import HEADING_ELEMENT

logger = logging.getLogger(__name__)

# Given a URI, return the markup found there
Fetcher = Callable[[str], str]

DEFAULT_MAX_FETCHES = 500


class AncestorFailurePolicy(str, Enum):
    """What to do when a missing ancestor cannot be synthesized."""

    ABORT = "abort"
    SKIP = "skip"


@dataclass
class ResolutionResult:
    """Closed flat map plus a record of what resolution did."""

    records: FlatTree
    synthesized: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


# -----------------------------------------------------------------------------
# Fetching and parsing
# -----------------------------------------------------------------------------


class WebFetcher:
    """Fetch ancestor pages over HTTP with a shared session.

    Use as a context manager, or call close(), to release the session.
    """

    def __init__(self, timeout: float = 15, session: requests.Session | None = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def __enter__(self) -> WebFetcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def __call__(self, uri: str) -> str:
        try:
            response = self.session.get(uri, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            msg = f"Failed to fetch {uri}: {e}"
            raise FetchError(uri, msg) from e
        return response.text


def parse_heading(idnumber: str, markup: str) -> str:
    """Return the text of the first heading in an ancestor page.

    Raises:
        HeadingParseError: If the page has no non-empty <h1>.
    """
    soup = BeautifulSoup(markup, "html.parser")
    heading = soup.find(HEADING_ELEMENT)
    text = heading.get_text(" ", strip=True) if heading is not None else ""
    if not text:
        msg = f"No <{HEADING_ELEMENT}> heading found at {idnumber}"
        raise HeadingParseError(idnumber, msg)
    return text


def synthesize_ancestor(idnumber: str, fetch: Fetcher) -> ResolutionRecord:
    """Build the record for a missing ancestor from the page it names.

    Raises:
        AncestorSynthesisError: If the page cannot be fetched, has no heading,
            or the identifier is not a Common Core URI.
    """
    try:
        shortname = url_to_code(idnumber)
    except ValueError as e:
        raise AncestorSynthesisError(idnumber, str(e)) from e

    description = html.escape(parse_heading(idnumber, fetch(idnumber)), quote=False)

    return ResolutionRecord(
        idnumber=idnumber,
        parentidnumber=derive_parent_idnumber(idnumber),
        description=description,
        shortname=shortname,
        gradelevels="",
        synthesized=True,
    )


# -----------------------------------------------------------------------------
# Resolution
# -----------------------------------------------------------------------------


def find_missing_parents(flat: Mapping[str, ResolutionRecord]) -> list[str]:
    """List parent identifiers referenced in `flat` but not keys of it.

    Order follows first reference; each identifier appears once.
    """
    missing: dict[str, None] = {}
    for record in flat.values():
        if not record.is_root and record.parentidnumber not in flat:
            missing[record.parentidnumber] = None
    return list(missing)


def resolve_missing_ancestors(
    flat: Mapping[str, ResolutionRecord],
    fetch: Fetcher,
    policy: AncestorFailurePolicy = AncestorFailurePolicy.ABORT,
    max_fetches: int = DEFAULT_MAX_FETCHES,
) -> ResolutionResult:
    """Add every missing ancestor of `flat` and return the closed map.

    The input mapping is not modified. Each missing identifier is fetched at
    most once. A synthesized ancestor may itself reference a missing
    grandparent, which is queued in turn.

    Args:
        flat: Extracted records keyed by idnumber.
        fetch: Returns the markup at a URI, raising FetchError on failure.
        policy: ABORT re-raises the first synthesis failure. SKIP logs it and
            leaves the children of that ancestor without a parent.
        max_fetches: Upper bound on ancestor fetches for one document.

    Returns:
        ResolutionResult with the closed records, in insertion order with
        synthesized ancestors appended.

    Raises:
        AncestorSynthesisError: On a failure under ABORT, or when the fetch
            budget is exhausted.
    """
    records: FlatTree = dict(flat)
    result = ResolutionResult(records=records)
    queue = deque(find_missing_parents(records))
    visited: set[str] = set()

    while queue:
        idnumber = queue.popleft()
        if idnumber in records or idnumber in visited:
            continue
        visited.add(idnumber)

        if len(visited) > max_fetches:
            msg = f"Gave up after {max_fetches} ancestor fetches (at {idnumber})"
            raise AncestorSynthesisError(idnumber, msg)

        try:
            ancestor = synthesize_ancestor(idnumber, fetch)
        except AncestorSynthesisError as e:
            if policy is AncestorFailurePolicy.ABORT:
                raise
            logger.warning("Skipping ancestor %s: %s", idnumber, e)
            result.skipped.append(idnumber)
            continue

        logger.debug("Synthesized ancestor %s (%s)", idnumber, ancestor.shortname)
        records[idnumber] = ancestor
        result.synthesized.append(idnumber)
        if not ancestor.is_root and ancestor.parentidnumber not in records:
            queue.append(ancestor.parentidnumber)

    return result
