"""FastAPI dependency providers: the SessionManager singleton and app settings."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from rdjson_viewer.service.session_manager import SessionManager, SessionNotFoundError
from rdjson_viewer.service.viewer_state import ViewerState
from rdjson_viewer.settings import Settings

_session_manager: SessionManager | None = None
_disable_session_list: bool = False


def init_session_manager(
    manager: SessionManager, *, disable_session_list: bool = False
) -> None:
    """Install the process-wide SessionManager (app startup, or tests)."""
    global _session_manager, _disable_session_list  # noqa: PLW0603
    _session_manager = manager
    _disable_session_list = disable_session_list


def reset_session_manager() -> None:
    global _session_manager, _disable_session_list  # noqa: PLW0603
    _session_manager = None
    _disable_session_list = False


def get_session_manager() -> SessionManager:
    if _session_manager is None:
        raise RuntimeError("SessionManager not initialised: call init_session_manager() first")
    return _session_manager


def is_session_list_disabled() -> bool:
    return _disable_session_list


def get_settings(request: Request) -> Settings:
    """Settings attached to the running app by ``create_app``."""
    return request.app.state.settings


def get_viewer_state(
    session_id: str,
    mgr: SessionManager = Depends(get_session_manager),  # noqa: B008
) -> ViewerState:
    """Resolve the ``{session_id}`` path parameter to its ViewerState, or 404."""
    try:
        return mgr.get_state(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found") from None
