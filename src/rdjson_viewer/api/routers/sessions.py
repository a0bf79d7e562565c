"""Session-scoped endpoints: one viewer per session, driven by user actions."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from rdjson_viewer.api.deps import get_session_manager, get_viewer_state, is_session_list_disabled
from rdjson_viewer.api.schemas import (
    BasePathRequest,
    FilterRequest,
    ParseRequest,
    QueryResponse,
    SessionCreateRequest,
    SessionListResponse,
    SessionResponse,
    ViewResponse,
)
from rdjson_viewer.service.session_manager import SessionInfo, SessionManager, SessionNotFoundError
from rdjson_viewer.service.viewer_state import ViewerState

router = APIRouter()


def _session_response(info: SessionInfo) -> SessionResponse:
    return SessionResponse(**asdict(info))


# -- session CRUD ------------------------------------------------------------


@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(
    body: SessionCreateRequest | None = None,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> SessionResponse:
    """Create a new session with an empty viewer."""
    info = mgr.create_session(metadata=body.metadata if body else {})
    return _session_response(info)


@router.get("", response_model=SessionListResponse)
async def list_sessions(
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> SessionListResponse:
    """List all active sessions."""
    if is_session_list_disabled():
        raise HTTPException(status_code=403, detail="Session listing is disabled")
    return SessionListResponse(sessions=[_session_response(s) for s in mgr.list_sessions()])


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> SessionResponse:
    try:
        info = mgr.get_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found") from None
    return _session_response(info)


@router.delete("/{session_id}", status_code=204)
async def close_session(
    session_id: str,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> None:
    """Close a session and discard its report."""
    try:
        mgr.close_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found") from None


# -- viewer actions ----------------------------------------------------------


@router.post("/{session_id}/submit", response_model=ViewResponse)
async def submit_report(
    body: ParseRequest,
    state: ViewerState = Depends(get_viewer_state),  # noqa: B008
) -> ViewResponse:
    """Replace the session's report; a failed parse clears the previous one."""
    state.change_base_path(body.base_path)
    state.load(body.content, body.format)
    return ViewResponse.from_snapshot(state.snapshot())


@router.put("/{session_id}/filter", response_model=ViewResponse)
async def change_filter(
    body: FilterRequest,
    state: ViewerState = Depends(get_viewer_state),  # noqa: B008
) -> ViewResponse:
    state.change_filter(severity=body.severity, source=body.source, rule=body.rule)
    return ViewResponse.from_snapshot(state.snapshot())


@router.put("/{session_id}/base-path", response_model=ViewResponse)
async def change_base_path(
    body: BasePathRequest,
    state: ViewerState = Depends(get_viewer_state),  # noqa: B008
) -> ViewResponse:
    """Change the link prefix; links are re-resolved, the report is not re-parsed."""
    state.change_base_path(body.base_path)
    return ViewResponse.from_snapshot(state.snapshot())


@router.get("/{session_id}/view", response_model=ViewResponse)
async def get_view(
    state: ViewerState = Depends(get_viewer_state),  # noqa: B008
) -> ViewResponse:
    return ViewResponse.from_snapshot(state.snapshot())


@router.get("/{session_id}/query", response_model=QueryResponse)
async def get_query(
    state: ViewerState = Depends(get_viewer_state),  # noqa: B008
) -> QueryResponse:
    """Query string that reopens the viewer on this session's input."""
    return QueryResponse(query=state.to_query_params())
