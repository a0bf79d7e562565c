"""FastMCP server exposing the rdjson viewer as MCP tools.

Run via::

    rdjson-viewer-mcp                       # reads .env (default: stdio)
    MCP_TRANSPORT=http rdjson-viewer-mcp    # streamable HTTP on port 9000

Sessions scope each client's viewer.  In stdio mode a default session is
used automatically; in HTTP/SSE mode callers should create sessions
explicitly.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from rdjson_viewer import __version__
from rdjson_viewer.parser.loader import InputFormat
from rdjson_viewer.service.query_params import build_viewer_url as _build_viewer_url
from rdjson_viewer.service.session_manager import SessionManager, SessionNotFoundError
from rdjson_viewer.service.viewer_state import ViewerState
from rdjson_viewer.settings import DEFAULT_VIEWER_BASE_URL, Settings

logger = logging.getLogger("rdjson_viewer.mcp")

mcp = FastMCP("rdjson viewer")
_session_manager: SessionManager | None = None
_viewer_base_url: str = DEFAULT_VIEWER_BASE_URL


def _require_manager() -> SessionManager:
    if _session_manager is None:
        raise ToolError("Session manager not initialised")
    return _session_manager


def _resolve_state(session_id: str | None = None) -> ViewerState:
    """Resolve a session_id to its ViewerState, defaulting to the stdio session."""
    mgr = _require_manager()
    if session_id is None:
        return mgr.get_or_create_default()
    try:
        return mgr.get_state(session_id)
    except SessionNotFoundError as exc:
        raise ToolError(str(exc)) from exc


def _parse_format(fmt: str) -> InputFormat:
    try:
        return InputFormat(fmt)
    except ValueError:
        raise ToolError(f"Unsupported format '{fmt}': use 'rdjson' or 'rdjsonl'") from None


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------

FORMAT_REFERENCE = """\
# rdjson / rdjsonl reference

rdjson is one JSON document with a `diagnostics` list:

```json
{"diagnostics": [
  {"message": "unused variable",
   "severity": "WARNING",
   "source": {"name": "golint", "url": "https://example.com/golint"},
   "code": {"value": "U1000", "url": "https://example.com/rules/U1000"},
   "location": {"path": "main.go",
                "range": {"start": {"line": 5, "column": 2},
                          "end": {"line": 5, "column": 9}}},
   "suggestions": [{"range": {"start": {"line": 5, "column": 2},
                              "end": {"line": 5, "column": 9}},
                    "text": "_"}],
   "related_locations": [{"message": "declared here",
                          "location": {"path": "main.go"}}]}
]}
```

rdjsonl puts one diagnostic object per line; blank lines are ignored.

Every field of a diagnostic is optional.  `severity` is one of `ERROR`,
`WARNING`, `INFO`.  Each entry of `diagnostics` must be a JSON object.
"""


@mcp.resource("rdjson://reference")
def format_reference() -> str:
    """rdjson / rdjsonl format reference."""
    return FORMAT_REFERENCE


@mcp.tool
def get_format_reference() -> str:
    """Get the rdjson / rdjsonl format reference with an example diagnostic."""
    return FORMAT_REFERENCE


# ---------------------------------------------------------------------------
# Session tools
# ---------------------------------------------------------------------------


@mcp.tool
def create_session(metadata_json: str | None = None) -> str:
    """Create a new session with an empty viewer and return its session_id.

    Args:
        metadata_json: Optional JSON object with metadata key-value pairs.
    """
    mgr = _require_manager()
    metadata: dict[str, str] = {}
    if metadata_json:
        try:
            metadata = json.loads(metadata_json)
        except json.JSONDecodeError as exc:
            raise ToolError(f"Invalid metadata JSON: {exc}") from exc
    info = mgr.create_session(metadata=metadata)
    return (
        f"Session created.  session_id: {info.session_id}\n"
        f"  created_at: {info.created_at.isoformat()}"
    )


@mcp.tool
def close_session(session_id: str) -> str:
    """Close a session and discard its report.

    Args:
        session_id: The session to close.
    """
    mgr = _require_manager()
    try:
        mgr.close_session(session_id)
    except SessionNotFoundError as exc:
        raise ToolError(str(exc)) from exc
    return f"Session '{session_id}' closed."


@mcp.tool
def list_sessions() -> str:
    """List all active sessions."""
    sessions = _require_manager().list_sessions()
    if not sessions:
        return "No active sessions."
    lines = ["Active sessions:", ""]
    for s in sessions:
        lines.append(
            f"  {s.session_id}  "
            f"(diagnostics: {s.diagnostic_count}, "
            f"last accessed: {s.last_accessed_at.isoformat()})"
        )
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Viewer tools (session-aware)
# ---------------------------------------------------------------------------


@mcp.tool
def submit_report(
    content: str,
    format: str = "rdjson",
    base_path: str = "",
    session_id: str | None = None,
) -> str:
    """Parse and validate a diagnostic report, replacing the session's current one.

    Args:
        content: rdjson document or rdjsonl lines.
        format: ``rdjson`` (single document) or ``rdjsonl`` (one diagnostic per line).
        base_path: Optional URL prefix used to turn file paths into links.
        session_id: Session to use (optional in stdio mode).
    """
    logger.info("submit_report called (format=%s, length=%d)", format, len(content))
    state = _resolve_state(session_id)
    state.change_base_path(base_path)
    outcome = state.load(content, _parse_format(format))
    if not outcome.ok:
        raise ToolError(f"{outcome.error}\n\nHint: call get_format_reference() for the format.")
    return "Report loaded.\n" + _statistics_text(state)


@mcp.tool
def get_statistics(session_id: str | None = None) -> str:
    """Severity counts over the whole report (filters do not apply).

    Args:
        session_id: Session to use (optional in stdio mode).
    """
    return _statistics_text(_resolve_state(session_id))


def _statistics_text(state: ViewerState) -> str:
    snap = state.snapshot()
    if snap.stats is None:
        raise ToolError(snap.error or "No report loaded.  Call submit_report() first.")
    lines = [f"  total: {snap.stats.total}"]
    lines.extend(f"  {sev}: {count}" for sev, count in snap.stats.display_items())
    facets = snap.facets
    lines.append(f"  severities: {', '.join(facets.severities) or '-'}")
    lines.append(f"  tools:      {', '.join(facets.sources) or '-'}")
    lines.append(f"  rules:      {', '.join(facets.rules) or '-'}")
    return "\n".join(lines)


@mcp.tool
def set_filter(
    severity: str = "",
    source: str = "",
    rule: str = "",
    session_id: str | None = None,
) -> str:
    """Filter the session's diagnostics; empty values match anything.

    Args:
        severity: Exact severity, e.g. ``ERROR``.
        source: Exact tool name (``source.name``).
        rule: Exact rule code (``code.value``).
        session_id: Session to use (optional in stdio mode).
    """
    state = _resolve_state(session_id)
    state.change_filter(severity=severity, source=source, rule=rule)
    snap = state.snapshot()
    total = snap.stats.total if snap.stats else 0
    return f"{len(snap.diagnostics)} of {total} diagnostics match."


@mcp.tool
def get_view(session_id: str | None = None, limit: int = 50) -> str:
    """Return the filtered diagnostics as JSON, with links and ranges resolved.

    Args:
        session_id: Session to use (optional in stdio mode).
        limit: Maximum number of diagnostics to return.
    """
    snap = _resolve_state(session_id).snapshot()
    if snap.collection is None:
        raise ToolError(snap.error or "No report loaded.  Call submit_report() first.")
    payload = {
        "filter": snap.filter.model_dump(),
        "matching": len(snap.cards),
        "diagnostics": [asdict(card) for card in snap.cards[:limit]],
    }
    return json.dumps(payload, indent=2)


@mcp.tool
def build_viewer_url(content: str, format: str = "rdjson", base_path: str = "") -> str:
    """Build a shareable browser URL that opens the report in the hosted viewer.

    Args:
        content: rdjson document or rdjsonl lines.
        format: ``rdjson`` or ``rdjsonl``.
        base_path: Optional URL prefix for file links.
    """
    return _build_viewer_url(
        content.encode("utf-8"), _parse_format(format), _viewer_base_url, base_path=base_path
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Run the MCP server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger.info(
        "rdjson viewer MCP server v%s starting (transport=%s)",
        __version__,
        settings.mcp_transport,
    )

    global _session_manager, _viewer_base_url  # noqa: PLW0603
    _viewer_base_url = settings.viewer_base_url
    _session_manager = SessionManager(
        ttl_seconds=settings.session_ttl_seconds,
        cleanup_interval=settings.session_cleanup_interval,
    )
    _session_manager.start()

    try:
        if settings.mcp_transport == "stdio":
            mcp.run(transport="stdio")
        else:
            mcp.run(
                transport=settings.mcp_transport,
                host=settings.mcp_server_host,
                port=settings.mcp_server_port,
                log_level=settings.log_level.lower(),
            )
    finally:
        _session_manager.stop()


if __name__ == "__main__":
    main()
