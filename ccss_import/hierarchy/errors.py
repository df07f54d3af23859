"""Exceptions raised while reading standards documents and resolving ancestors."""

from __future__ import annotations


class DocumentError(Exception):
    """Base class for problems with a standards source document."""


class DocumentParseError(DocumentError):
    """The document could not be read or is not well-formed XML."""


class DocumentValidationError(DocumentError):
    """The document parsed but is missing required content."""


class AncestorSynthesisError(Exception):
    """A missing ancestor could not be built from its external description.

    Attributes:
        idnumber: Identifier of the ancestor that failed.
    """

    def __init__(self, idnumber: str, message: str):
        super().__init__(message)
        self.idnumber = idnumber


class FetchError(AncestorSynthesisError):
    """The ancestor's URI could not be fetched."""


class HeadingParseError(AncestorSynthesisError):
    """The fetched markup has no usable heading."""
