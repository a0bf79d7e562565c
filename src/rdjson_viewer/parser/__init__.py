"""Report parsing, validation and location resolution."""

from rdjson_viewer.parser.loader import InputFormat, ReportLoader
from rdjson_viewer.parser.resolver import format_range, parse_line_anchor, resolve_link
from rdjson_viewer.parser.validator import ReportValidator

__all__ = [
    "InputFormat",
    "ReportLoader",
    "ReportValidator",
    "format_range",
    "parse_line_anchor",
    "resolve_link",
]
