"""Tests for facet extraction and conjunctive filtering."""

from __future__ import annotations

import pytest

from rdjson_viewer.models.diagnostic import Diagnostic, DiagnosticCollection
from rdjson_viewer.parser.loader import InputFormat, ReportLoader
from rdjson_viewer.parser.validator import ReportValidator
from rdjson_viewer.service.filtering import DiagnosticFilter, apply_filter, facets, matches
from tests.conftest import SAMPLE_RDJSON


@pytest.fixture
def diagnostics(loader: ReportLoader, validator: ReportValidator) -> list[Diagnostic]:
    raw = loader.load_string(SAMPLE_RDJSON, InputFormat.RDJSON)
    return validator.validate(raw).diagnostics


def _messages(diags: list[Diagnostic]) -> list[str | None]:
    return [d.message for d in diags]


class TestFacets:
    def test_first_seen_order(self, diagnostics: list[Diagnostic]) -> None:
        f = facets(diagnostics)
        assert f.severities == ["WARNING", "ERROR", "INFO"]
        assert f.sources == ["golint", "typecheck", "ineffassign"]
        assert f.rules == ["exported", "UndeclaredName", "prealloc"]

    def test_absent_and_empty_values_excluded(self) -> None:
        diags = DiagnosticCollection.model_validate(
            {
                "diagnostics": [
                    {},
                    {"severity": "", "source": {"name": ""}, "code": {}},
                    {"severity": "ERROR", "source": {}},
                ]
            }
        ).diagnostics
        f = facets(diags)
        assert f.severities == ["ERROR"]
        assert f.sources == []
        assert f.rules == []

    def test_no_duplicates(self, diagnostics: list[Diagnostic]) -> None:
        f = facets(diagnostics + diagnostics)
        for values in (f.severities, f.sources, f.rules):
            assert len(values) == len(set(values))

    def test_empty(self) -> None:
        f = facets([])
        assert (f.severities, f.sources, f.rules) == ([], [], [])


class TestApplyFilter:
    def test_empty_filter_keeps_everything(self, diagnostics: list[Diagnostic]) -> None:
        flt = DiagnosticFilter()
        assert flt.is_empty
        assert apply_filter(diagnostics, flt) == diagnostics

    def test_by_severity_keeps_order(self, diagnostics: list[Diagnostic]) -> None:
        result = apply_filter(diagnostics, DiagnosticFilter(severity="ERROR"))
        assert _messages(result) == ["undefined: bar", "ineffectual assignment to err"]

    def test_by_source(self, diagnostics: list[Diagnostic]) -> None:
        result = apply_filter(diagnostics, DiagnosticFilter(source="golint"))
        assert _messages(result) == [
            "exported function Foo should have comment",
            "consider preallocating slice",
        ]

    def test_by_rule(self, diagnostics: list[Diagnostic]) -> None:
        result = apply_filter(diagnostics, DiagnosticFilter(rule="prealloc"))
        assert _messages(result) == ["consider preallocating slice"]

    def test_conjunctive(self, diagnostics: list[Diagnostic]) -> None:
        assert _messages(
            apply_filter(diagnostics, DiagnosticFilter(severity="INFO", source="golint"))
        ) == ["consider preallocating slice"]
        assert apply_filter(diagnostics, DiagnosticFilter(severity="ERROR", source="golint")) == []

    def test_exact_match_only(self, diagnostics: list[Diagnostic]) -> None:
        assert apply_filter(diagnostics, DiagnosticFilter(severity="error")) == []
        assert apply_filter(diagnostics, DiagnosticFilter(source="go")) == []

    def test_absent_field_does_not_match(self) -> None:
        diag = Diagnostic.model_validate({"message": "m"})
        assert not matches(diag, DiagnosticFilter(rule="R1"))
        assert matches(diag, DiagnosticFilter())

    def test_idempotent(self, diagnostics: list[Diagnostic]) -> None:
        flt = DiagnosticFilter(severity="ERROR", source="typecheck")
        once = apply_filter(diagnostics, flt)
        assert apply_filter(once, flt) == once

    def test_source_not_mutated(self, diagnostics: list[Diagnostic]) -> None:
        before = list(diagnostics)
        apply_filter(diagnostics, DiagnosticFilter(severity="INFO"))
        assert diagnostics == before
