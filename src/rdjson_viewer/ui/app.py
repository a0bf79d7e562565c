"""Gradio viewer UI: renders the snapshot produced by ViewerState."""

from __future__ import annotations

import html
import logging
from typing import Any

import gradio as gr

from rdjson_viewer import __version__
from rdjson_viewer.models.diagnostic import SEVERITY_ORDER
from rdjson_viewer.parser.loader import InputFormat
from rdjson_viewer.service.cards import DiagnosticCard, LocationView
from rdjson_viewer.service.statistics import DiagnosticStats
from rdjson_viewer.service.viewer_state import ViewerSnapshot, ViewerState
from rdjson_viewer.settings import Settings

logger = logging.getLogger("rdjson_viewer.ui")

_FORMATS = [fmt.value for fmt in InputFormat]

_CSS = """\
.gradio-container { max-width: 1100px !important; margin: auto; }
.rd-card {
  border-left: 4px solid #d1d5db;
  border-radius: 8px;
  box-shadow: 0 1px 3px rgba(0,0,0,.15);
  margin-bottom: 16px;
  padding: 12px 16px;
  background: #fff;
  color: #1f2937;
}
.rd-ERROR   { background: #fee2e2; border-color: #ef4444; color: #b91c1c; }
.rd-WARNING { background: #fef9c3; border-color: #eab308; color: #a16207; }
.rd-INFO    { background: #dbeafe; border-color: #3b82f6; color: #1d4ed8; }
.rd-card h3 { margin: 0 0 6px 0; font-size: 1.05rem; }
.rd-message { color: #1f2937; margin-bottom: 6px; white-space: pre-wrap; }
.rd-range, .rd-replacement {
  font-family: ui-monospace, monospace;
  background: #f3f4f6;
  padding: 1px 4px;
  border-radius: 4px;
}
.rd-replacement { background: #dcfce7; }
.rd-tag {
  display: inline-block;
  background: #e5e7eb;
  color: #374151;
  padding: 2px 8px;
  border-radius: 4px;
  margin-right: 6px;
  font-size: .85rem;
}
.rd-related { margin-top: 6px; padding-left: 12px; border-left: 2px solid #d1d5db; }
.rd-error {
  background: #fee2e2;
  border-left: 4px solid #ef4444;
  color: #b91c1c;
  padding: 10px 14px;
}
.rd-stats span.rd-count {
  background: #e5e7eb;
  padding: 2px 8px;
  border-radius: 4px;
  margin-right: 12px;
}
"""

# Write the submitted input back into the address bar without reloading.
_PUSH_QUERY_JS = """
(query) => {
    if (query) {
        window.history.pushState({}, '', window.location.pathname + '?' + query);
    }
}
"""


# -- HTML rendering ------------------------------------------------------------


def _esc(value: Any) -> str:
    return html.escape(str(value)) if value is not None else ""


def _link_or_text(text: str | None, href: str | None, css: str = "") -> str:
    label = _esc(text)
    if href:
        return (
            f'<a href="{_esc(href)}" target="_blank" rel="noopener noreferrer"'
            f' class="{css}">{label}</a>'
        )
    return f'<span class="{css}">{label}</span>'


def _render_location(loc: LocationView) -> str:
    out = _link_or_text(loc.path, loc.link, "rd-path")
    if loc.range_text:
        out += f' <span class="rd-range">{_esc(loc.range_text)}</span>'
    return out


def render_card(card: DiagnosticCard) -> str:
    severity_css = f" rd-{card.severity}" if card.severity in SEVERITY_ORDER else ""
    parts = [f'<div class="rd-card{severity_css}">']
    if card.severity:
        parts.append(f"<h3>{_esc(card.severity)}</h3>")
    parts.append(f'<div class="rd-message">{_esc(card.message)}</div>')
    if card.location is not None:
        parts.append(f"<div>{_render_location(card.location)}</div>")

    tags = []
    if card.source_name:
        tags.append(f'<span class="rd-tag">{_esc(card.source_name)}</span>')
    if card.code_value:
        tags.append(f'<span class="rd-tag">{_link_or_text(card.code_value, card.code_url)}</span>')
    if tags:
        parts.append(f'<div style="margin-top:6px">{"".join(tags)}</div>')

    if card.suggestions:
        items = "".join(
            f'<li>Replace <span class="rd-range">{_esc(s.range_text)}</span> with '
            f'<span class="rd-replacement">{_esc(s.text)}</span></li>'
            for s in card.suggestions
        )
        parts.append(f"<div><strong>Suggestions:</strong><ul>{items}</ul></div>")

    if card.related_locations:
        parts.append("<div><strong>Related Locations:</strong>")
        for related in card.related_locations:
            parts.append('<div class="rd-related">')
            parts.append(f"<div>{_esc(related.message)}</div>")
            if related.location is not None:
                parts.append(f"<div>{_render_location(related.location)}</div>")
            parts.append("</div>")
        parts.append("</div>")

    parts.append("</div>")
    return "".join(parts)


def render_stats(stats: DiagnosticStats | None) -> str:
    if stats is None:
        return ""
    counts = [f'<strong>Total:</strong> <span class="rd-count">{stats.total}</span>']
    counts.extend(
        f'<strong>{_esc(sev)}:</strong> <span class="rd-count">{n}</span>'
        for sev, n in stats.display_items()
    )
    return f'<div class="rd-stats"><h3>Diagnostic Statistics</h3>{" ".join(counts)}</div>'


def render_error(error: str | None) -> str:
    if not error:
        return ""
    return f'<div class="rd-error" role="alert"><strong>Error</strong><br>{_esc(error)}</div>'


def render_cards(snap: ViewerSnapshot) -> str:
    if snap.collection is None:
        return ""
    return "<h2>Diagnostic Results</h2>" + "".join(render_card(c) for c in snap.cards)


# -- event handlers ------------------------------------------------------------


def _view_outputs(state: ViewerState) -> tuple[Any, ...]:
    """(state, error, stats, severity, source, rule, cards) for the output components."""
    snap = state.snapshot()
    flt = snap.filter

    def _dropdown(all_label: str, values: list[str], selected: str) -> Any:
        # A selection kept from an earlier report must stay selectable.
        if selected and selected not in values:
            values = [*values, selected]
        return gr.Dropdown(
            choices=[(all_label, "")] + [(v, v) for v in values],
            value=selected,
            visible=snap.collection is not None,
            allow_custom_value=True,
        )

    return (
        state,
        render_error(snap.error),
        render_stats(snap.stats),
        _dropdown("All Severities", snap.facets.severities, flt.severity),
        _dropdown("All Tools", snap.facets.sources, flt.source),
        _dropdown("All Rules", snap.facets.rules, flt.rule),
        render_cards(snap),
    )


def init_from_request(request: gr.Request) -> tuple[Any, ...]:
    """Page load: build the viewer from the page's query parameters."""
    params = dict(request.query_params) if request is not None else {}
    state = ViewerState.from_query_params(params)
    return (state.raw_text, state.format.value, state.base_path, *_view_outputs(state))


def submit(
    state: ViewerState | None, raw_text: str, fmt: str, base_path: str
) -> tuple[Any, ...]:
    """Render button: parse the input and return the query string to persist."""
    state = state or ViewerState()
    state.change_input(raw_text)
    state.change_format(fmt)
    state.change_base_path(base_path)
    state.submit()
    return (*_view_outputs(state), state.to_query_params())


def change_filter(
    state: ViewerState | None, severity: str | None, source: str | None, rule: str | None
) -> tuple[Any, ...]:
    state = state or ViewerState()
    state.change_filter(severity=severity or "", source=source or "", rule=rule or "")
    return _view_outputs(state)


def change_base_path(state: ViewerState | None, base_path: str) -> tuple[Any, ...]:
    state = state or ViewerState()
    state.change_base_path(base_path)
    return _view_outputs(state)


# -- layout --------------------------------------------------------------------


def create_blocks() -> Any:
    """Build and return a ``gr.Blocks`` instance (without launching)."""
    with gr.Blocks(title="RDJSON Viewer") as demo:
        state = gr.State(None)

        gr.Markdown(f"## RDJSON Viewer <small>v{__version__}</small>")
        with gr.Row():
            fmt = gr.Dropdown(
                choices=_FORMATS, value=InputFormat.RDJSON.value, label="Input Format"
            )
            base_path = gr.Textbox(
                label="Base HTML Path (optional)", placeholder="Enter base HTML path"
            )
        raw_text = gr.Textbox(
            label="Report", placeholder="Paste your rdjson here...", lines=10, max_lines=30
        )
        render_btn = gr.Button("Render", variant="primary")
        query_out = gr.Textbox(visible=False)

        error_html = gr.HTML()
        stats_html = gr.HTML()
        with gr.Row():
            severity_dd = gr.Dropdown(
                label="Severity", choices=[("All Severities", "")], value="", visible=False,
                allow_custom_value=True,
            )
            source_dd = gr.Dropdown(
                label="Tool", choices=[("All Tools", "")], value="", visible=False,
                allow_custom_value=True,
            )
            rule_dd = gr.Dropdown(
                label="Rule", choices=[("All Rules", "")], value="", visible=False,
                allow_custom_value=True,
            )
        cards_html = gr.HTML()

        view = [state, error_html, stats_html, severity_dd, source_dd, rule_dd, cards_html]

        fmt.change(
            fn=lambda f: gr.Textbox(placeholder=f"Paste your {f} here..."),
            inputs=[fmt],
            outputs=[raw_text],
        )
        render_btn.click(
            fn=submit,
            inputs=[state, raw_text, fmt, base_path],
            outputs=[*view, query_out],
        ).then(fn=None, inputs=[query_out], js=_PUSH_QUERY_JS)

        for dropdown in (severity_dd, source_dd, rule_dd):
            dropdown.input(
                fn=change_filter,
                inputs=[state, severity_dd, source_dd, rule_dd],
                outputs=view,
            )
        base_path.input(fn=change_base_path, inputs=[state, base_path], outputs=view)

        demo.load(fn=init_from_request, outputs=[raw_text, fmt, base_path, *view])

    return demo


def create_ui(settings: Settings | None = None) -> None:
    """Build and launch the viewer.

    When ``ui_root_path`` is set (e.g. ``/ui``), Gradio is mounted inside a
    FastAPI wrapper at that path so a load balancer can forward ``/ui/*``
    without stripping the prefix.
    """
    import uvicorn

    settings = settings or Settings()
    logging.basicConfig(level=settings.log_level.upper())
    demo = create_blocks()
    root_path = settings.ui_root_path
    logger.info(
        "rdjson viewer UI starting (port=%d, root_path=%r)", settings.ui_server_port, root_path
    )

    if root_path:
        from fastapi import FastAPI
        from fastapi.responses import RedirectResponse

        app = FastAPI()

        # Redirect /ui → /ui/ so the load balancer URL works without trailing slash
        @app.get(root_path)
        async def _redirect_to_trailing_slash() -> RedirectResponse:
            return RedirectResponse(url=f"{root_path}/")

        app = gr.mount_gradio_app(app, demo, path=root_path, css=_CSS)
        uvicorn.run(
            app,
            host="0.0.0.0",
            port=settings.ui_server_port,
            log_level=settings.log_level.lower(),
            proxy_headers=True,
            forwarded_allow_ips="*",
            access_log=False,
        )
    else:
        demo.launch(server_name="0.0.0.0", server_port=settings.ui_server_port, css=_CSS)


def main() -> None:
    """Entry point for ``rdjson-viewer-ui`` console script."""
    create_ui()
