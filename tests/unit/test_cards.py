"""Tests for diagnostic cards: links and ranges resolved per location."""

from __future__ import annotations

from rdjson_viewer.models.diagnostic import Diagnostic
from rdjson_viewer.parser.loader import InputFormat, ReportLoader
from rdjson_viewer.parser.validator import ReportValidator
from rdjson_viewer.service.cards import build_card
from tests.conftest import BASE_PATH, SAMPLE_RDJSON


def _sample(loader: ReportLoader, validator: ReportValidator) -> list[Diagnostic]:
    return validator.validate(loader.load_string(SAMPLE_RDJSON, InputFormat.RDJSON)).diagnostics


class TestBuildCard:
    def test_full_card(self, loader: ReportLoader, validator: ReportValidator) -> None:
        card = build_card(_sample(loader, validator)[1], BASE_PATH)
        assert card.message == "undefined: bar"
        assert card.severity == "ERROR"
        assert card.source_name == "typecheck"
        assert card.code_value == "UndeclaredName"
        assert card.code_url is None

        assert card.location is not None
        assert card.location.path == "main.go"
        assert card.location.link == f"{BASE_PATH}/main.go#L3-L7"
        assert card.location.range_text == "3:5 - 7:2"

        assert len(card.suggestions) == 1
        assert card.suggestions[0].range_text == "3:5-8"
        assert card.suggestions[0].text == "baz"

        related = card.related_locations[0]
        assert related.message == "baz declared here"
        assert related.location is not None
        assert related.location.link == f"{BASE_PATH}/baz.go#L20"
        assert related.location.range_text == "20"

    def test_same_line_column_span(
        self, loader: ReportLoader, validator: ReportValidator
    ) -> None:
        card = build_card(_sample(loader, validator)[0], BASE_PATH)
        assert card.location is not None
        assert card.location.link == f"{BASE_PATH}/pkg/foo.go#L12"
        assert card.location.range_text == "12:1-9"
        assert card.code_url == "https://example.com/rules/exported"

    def test_without_base_path(self, loader: ReportLoader, validator: ReportValidator) -> None:
        card = build_card(_sample(loader, validator)[1], "")
        assert card.location is not None
        assert card.location.link is None
        assert card.location.range_text == "3:5 - 7:2"

    def test_empty_diagnostic(self) -> None:
        card = build_card(Diagnostic(), BASE_PATH)
        assert card.message is None
        assert card.location is None
        assert card.suggestions == []
        assert card.related_locations == []

    def test_location_without_range(self) -> None:
        card = build_card(Diagnostic.model_validate({"location": {"path": "a.go"}}), BASE_PATH)
        assert card.location is not None
        assert card.location.link == f"{BASE_PATH}/a.go"
        assert card.location.range_text is None
