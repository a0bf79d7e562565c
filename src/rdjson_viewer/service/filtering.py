"""Facet extraction and conjunctive filtering over a diagnostic list."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from pydantic import BaseModel

from rdjson_viewer.models.diagnostic import Diagnostic


class DiagnosticFilter(BaseModel):
    """Current filter selection.  An empty string means "any value"."""

    severity: str = ""
    source: str = ""
    rule: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.severity or self.source or self.rule)


@dataclass
class Facets:
    """Distinct filterable values, in order of first occurrence."""

    severities: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    rules: list[str] = field(default_factory=list)


def _distinct(
    diagnostics: Iterable[Diagnostic], key: Callable[[Diagnostic], str | None]
) -> list[str]:
    # dict keeps insertion order; falsy values (absent or "") are skipped
    seen: dict[str, None] = {}
    for diagnostic in diagnostics:
        value = key(diagnostic)
        if value:
            seen.setdefault(value, None)
    return list(seen)


def facets(diagnostics: Sequence[Diagnostic]) -> Facets:
    return Facets(
        severities=_distinct(diagnostics, lambda d: d.severity),
        sources=_distinct(diagnostics, lambda d: d.source_name),
        rules=_distinct(diagnostics, lambda d: d.code_value),
    )


def matches(diagnostic: Diagnostic, flt: DiagnosticFilter) -> bool:
    return (
        (not flt.severity or diagnostic.severity == flt.severity)
        and (not flt.source or diagnostic.source_name == flt.source)
        and (not flt.rule or diagnostic.code_value == flt.rule)
    )


def apply_filter(
    diagnostics: Sequence[Diagnostic], flt: DiagnosticFilter
) -> list[Diagnostic]:
    """Return the diagnostics matching every non-empty filter field, in order.

    The input is never modified; callers always pass the full collection.
    """
    return [d for d in diagnostics if matches(d, flt)]
