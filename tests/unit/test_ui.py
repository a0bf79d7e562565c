"""Tests for the Gradio UI: HTML rendering and event handlers."""

from __future__ import annotations

from types import SimpleNamespace
from urllib.parse import parse_qsl

import gradio as gr

from rdjson_viewer.service.query_params import encode_param
from rdjson_viewer.service.statistics import DiagnosticStats
from rdjson_viewer.service.viewer_state import ViewerState
from rdjson_viewer.ui.app import (
    change_base_path,
    change_filter,
    create_blocks,
    init_from_request,
    render_card,
    render_error,
    render_stats,
    submit,
)
from tests.conftest import BASE_PATH, SAMPLE_RDJSON


def _loaded() -> ViewerState:
    state = ViewerState()
    state.load(SAMPLE_RDJSON, "rdjson")
    return state


class TestRendering:
    def test_stats_fixed_order(self) -> None:
        html = render_stats(DiagnosticStats(total=3, per_severity={"INFO": 1, "ERROR": 2}))
        assert html.index("ERROR") < html.index("INFO")
        assert "WARNING" not in html
        assert render_stats(None) == ""

    def test_error_escaped(self) -> None:
        html = render_error("Invalid format: Invalid JSON in line: <script>")
        assert "&lt;script&gt;" in html
        assert "<script>" not in html
        assert render_error(None) == ""

    def test_card_with_link(self) -> None:
        state = _loaded()
        state.change_base_path(BASE_PATH)
        html = render_card(state.snapshot().cards[1])
        assert "rd-ERROR" in html
        assert f'href="{BASE_PATH}/main.go#L3-L7"' in html
        assert "3:5 - 7:2" in html
        assert "Suggestions:" in html
        assert "Related Locations:" in html

    def test_card_without_link(self) -> None:
        html = render_card(_loaded().snapshot().cards[3])
        assert "href=" not in html
        assert "consider preallocating slice" in html

    def test_unknown_severity_has_no_style(self) -> None:
        state = ViewerState()
        state.load('{"diagnostics": [{"severity": "HINT", "message": "m"}]}', "rdjson")
        html = render_card(state.snapshot().cards[0])
        assert "rd-HINT" not in html
        assert "<h3>HINT</h3>" in html


class TestHandlers:
    def test_submit_returns_query(self) -> None:
        outputs = submit(None, SAMPLE_RDJSON, "rdjson", BASE_PATH)
        state, error, stats, *_dropdowns, cards, query = outputs
        assert isinstance(state, ViewerState)
        assert error == ""
        assert "Diagnostic Statistics" in stats
        assert cards.count("rd-card") == 4
        params = dict(parse_qsl(query))
        assert list(params) == ["rdjson", "base_path_url"]

    def test_submit_error(self) -> None:
        state, error, stats, *_rest = submit(_loaded(), "{", "rdjson", "")
        assert "Invalid format:" in error
        assert stats == ""
        assert state.collection is None

    def test_change_filter(self) -> None:
        outputs = change_filter(_loaded(), "ERROR", None, None)
        assert outputs[-1].count('class="rd-card') == 2

    def test_filter_kept_across_reports(self) -> None:
        state, *_rest = submit(None, SAMPLE_RDJSON, "rdjson", "")
        change_filter(state, "ERROR", "", "")
        warnings_only = '{"diagnostics": [{"message": "w", "severity": "WARNING"}]}'
        _state, _error, _stats, severity_dd, *_rest = submit(state, warnings_only, "rdjson", "")
        assert severity_dd.value == "ERROR"
        assert [value for _, value in severity_dd.choices] == ["", "WARNING", "ERROR"]
        # the kept selection is read back without a Gradio "not in choices" error
        assert severity_dd.preprocess("ERROR") == "ERROR"
        outputs = change_filter(state, "", "", "")
        assert outputs[-1].count('class="rd-card') == 1

    def test_change_base_path(self) -> None:
        outputs = change_base_path(_loaded(), BASE_PATH)
        assert f"{BASE_PATH}/pkg/foo.go#L12" in outputs[-1]

    def test_init_from_request(self) -> None:
        request = SimpleNamespace(
            query_params={"rdjson": encode_param(SAMPLE_RDJSON), "base_path_url": BASE_PATH}
        )
        outputs = init_from_request(request)  # type: ignore[arg-type]
        raw_text, fmt, base_path, state, *_rest = outputs
        assert raw_text == SAMPLE_RDJSON
        assert fmt == "rdjson"
        assert base_path == BASE_PATH
        assert state.collection is not None

    def test_init_decode_error(self) -> None:
        request = SimpleNamespace(query_params={"rdjsonl": "%"})
        outputs = init_from_request(request)  # type: ignore[arg-type]
        _raw, _fmt, _base, state, error, *_rest = outputs
        assert state.error == "Invalid rdjsonl URL parameter"
        assert "Invalid rdjsonl URL parameter" in error


class TestLayout:
    def test_create_blocks(self) -> None:
        assert isinstance(create_blocks(), gr.Blocks)
