"""Error taxonomy for report decoding, parsing, and structural validation."""

from __future__ import annotations


class ReportError(Exception):
    """Base class for every failure raised while turning input into a report."""


class DecodeError(ReportError):
    """A URL query parameter could not be percent-decoded.

    Localized to the offending parameter; the message names it, e.g.
    ``Invalid rdjson URL parameter``.
    """

    def __init__(self, param: str) -> None:
        self.param = param
        super().__init__(f"Invalid {param} URL parameter")


class ParseError(ReportError):
    """Malformed JSON, either the whole document or one rdjsonl line."""

    def __init__(self, message: str, line: str | None = None) -> None:
        self.line = line
        super().__init__(message)


class ValidationError(ReportError):
    """Well-formed JSON that is not a diagnostic report.

    Raised when ``diagnostics`` is missing or not a list, or when an entry
    is not a JSON object (``index`` then points at the first bad entry).
    """

    def __init__(self, message: str, index: int | None = None) -> None:
        self.index = index
        super().__init__(message)
