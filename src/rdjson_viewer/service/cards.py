"""Per-diagnostic view models with links and range strings already resolved."""

from __future__ import annotations

from dataclasses import dataclass, field

from rdjson_viewer.models.diagnostic import Diagnostic, Location
from rdjson_viewer.parser.resolver import format_range, resolve_link


@dataclass
class LocationView:
    path: str | None
    link: str | None
    range_text: str | None


@dataclass
class SuggestionView:
    range_text: str | None
    text: str | None


@dataclass
class RelatedLocationView:
    message: str | None
    location: LocationView | None


@dataclass
class DiagnosticCard:
    """Everything the presentation layer shows for one diagnostic."""

    message: str | None
    severity: str | None
    location: LocationView | None
    source_name: str | None
    code_value: str | None
    code_url: str | None
    suggestions: list[SuggestionView] = field(default_factory=list)
    related_locations: list[RelatedLocationView] = field(default_factory=list)


def _location_view(location: Location | None, base_path: str | None) -> LocationView | None:
    if location is None:
        return None
    return LocationView(
        path=location.path,
        link=resolve_link(location, base_path),
        range_text=format_range(location.range),
    )


def build_card(diagnostic: Diagnostic, base_path: str | None) -> DiagnosticCard:
    return DiagnosticCard(
        message=diagnostic.message,
        severity=diagnostic.severity,
        location=_location_view(diagnostic.location, base_path),
        source_name=diagnostic.source_name,
        code_value=diagnostic.code_value,
        code_url=diagnostic.code.url if diagnostic.code else None,
        suggestions=[
            SuggestionView(range_text=format_range(s.range), text=s.text)
            for s in diagnostic.suggestions or []
        ],
        related_locations=[
            RelatedLocationView(
                message=r.message, location=_location_view(r.location, base_path)
            )
            for r in diagnostic.related_locations or []
        ],
    )
