"""Identifier helpers shared by the extractor and the ancestor resolver."""

from __future__ import annotations

import html
from collections.abc import Iterable, Mapping

from ccss_import.hierarchy.models import ResolutionRecord
from ccss_import.models.constants import (
    CCSS_ORIGINS,
    CODE_SEPARATOR,
    CODE_TAG,
    IDNUMBER_SEPARATOR,
    ROOT_SEPARATOR_THRESHOLD,
)


def derive_parent_idnumber(idnumber: str) -> str:
    """Return the parent identifier encoded in an identifier's path.

    Identifiers with more than ROOT_SEPARATOR_THRESHOLD separators have a
    parent: the prefix up to and including the last separator that is not
    the identifier's final character. Anything shallower is a root.

    >>> derive_parent_idnumber("http://corestandards.org/Math/Content/K/CC/")
    'http://corestandards.org/Math/Content/K/'
    >>> derive_parent_idnumber("http://corestandards.org/Math/")
    ''
    """
    if idnumber.count(IDNUMBER_SEPARATOR) <= ROOT_SEPARATOR_THRESHOLD:
        return ""
    cut = idnumber.rfind(IDNUMBER_SEPARATOR, 0, len(idnumber) - 1)
    return idnumber[: cut + 1]


def url_to_code(url: str) -> str:
    """Build a dotted short code from a Common Core URI.

    >>> url_to_code("http://corestandards.org/Math/Content/K/CC")
    'CCSS.Math.Content.K.CC'

    Raises:
        ValueError: If the URI is not under a known Common Core origin.
    """
    for origin in CCSS_ORIGINS:
        if url.startswith(origin):
            path = url[len(origin):].rstrip(IDNUMBER_SEPARATOR)
            return CODE_TAG + path.replace(IDNUMBER_SEPARATOR, CODE_SEPARATOR)
    msg = f"'{url}' is not a Common Core URI"
    raise ValueError(msg)


def statements_to_html(statements: Iterable[str]) -> str:
    """Escape each statement, wrap it in a paragraph and join them."""
    return "".join(f"<p>{html.escape(statement, quote=False)}</p>" for statement in statements).strip()


def join_values(values: Iterable[str]) -> str:
    """Join short codes or grade levels the way they are displayed."""
    return ", ".join(values)


def order_for_creation(flat: Mapping[str, ResolutionRecord]) -> list[ResolutionRecord]:
    """Sort records so every parent precedes its children.

    A parent identifier is always a strict prefix of its children's, so
    ordering by identifier length is enough. The sort is stable: records of
    equal length keep their insertion order.
    """
    return sorted(flat.values(), key=lambda record: len(record.idnumber))
