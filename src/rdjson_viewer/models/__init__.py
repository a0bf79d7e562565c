"""Pydantic domain models for the rdjson viewer."""

from rdjson_viewer.models.diagnostic import (
    SEVERITY_ORDER,
    Code,
    Diagnostic,
    DiagnosticCollection,
    Location,
    Position,
    Range,
    RelatedLocation,
    Severity,
    Source,
    Suggestion,
)
from rdjson_viewer.models.errors import DecodeError, ParseError, ReportError, ValidationError

__all__ = [
    "SEVERITY_ORDER",
    "Code",
    "DecodeError",
    "Diagnostic",
    "DiagnosticCollection",
    "Location",
    "ParseError",
    "Position",
    "Range",
    "RelatedLocation",
    "ReportError",
    "Severity",
    "Source",
    "Suggestion",
    "ValidationError",
]
