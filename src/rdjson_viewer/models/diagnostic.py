"""Diagnostic report types: positions, ranges, locations, suggestions, diagnostics."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    ValidatorFunctionWrapHandler,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError


class Severity(StrEnum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


# Fixed display order for statistics, independent of encounter order.
SEVERITY_ORDER: tuple[Severity, ...] = (Severity.ERROR, Severity.WARNING, Severity.INFO)


class _ReportNode(BaseModel):
    """Base for report nodes: every field is optional and malformed values become absent.

    Only the ``diagnostics`` list shape is enforced by the validator; anything
    deeper is read defensively, so a bad ``location`` or a string ``line``
    that is not a number simply shows up as ``None``.
    """

    model_config = ConfigDict(extra="allow")

    @field_validator("*", mode="wrap")
    @classmethod
    def _absent_on_error(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except PydanticValidationError:
            return None


class Position(_ReportNode):
    line: int | None = None
    column: int | None = None

    @field_validator("line", "column", mode="before")
    @classmethod
    def _reject_bool(cls, value: Any) -> Any:
        # JSON true/false is not a number; lax mode would read it as 1/0
        return None if isinstance(value, bool) else value


class Range(_ReportNode):
    start: Position | None = None
    end: Position | None = None


class Location(_ReportNode):
    path: str | None = None
    range: Range | None = None


class Source(_ReportNode):
    """Tool that produced a diagnostic."""

    name: str | None = None
    url: str | None = None


class Code(_ReportNode):
    """Rule code, optionally linking to its documentation."""

    value: str | None = None
    url: str | None = None


class Suggestion(_ReportNode):
    """Proposed replacement of ``range`` by ``text``."""

    range: Range | None = None
    text: str | None = None


class RelatedLocation(_ReportNode):
    message: str | None = None
    location: Location | None = None


class Diagnostic(_ReportNode):
    """One reported issue."""

    message: str | None = None
    location: Location | None = None
    severity: str | None = None
    source: Source | None = None
    code: Code | None = None
    suggestions: list[Suggestion] | None = None
    related_locations: list[RelatedLocation] | None = None
    original_output: str | None = None

    @field_validator("suggestions", "related_locations", mode="before")
    @classmethod
    def _keep_object_entries(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [item for item in value if isinstance(item, dict)]
        return value

    @property
    def source_name(self) -> str | None:
        return self.source.name if self.source else None

    @property
    def code_value(self) -> str | None:
        return self.code.value if self.code else None


class DiagnosticCollection(BaseModel):
    """Root of a parsed report.  Rebuilt wholesale on every parse."""

    model_config = ConfigDict(extra="allow")

    diagnostics: list[Diagnostic] = []
