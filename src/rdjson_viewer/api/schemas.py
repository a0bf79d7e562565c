"""API request/response Pydantic schemas."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from rdjson_viewer.parser.loader import InputFormat
from rdjson_viewer.service.viewer_state import ViewerSnapshot


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = ""


# ---------------------------------------------------------------------------
# Report schemas
# ---------------------------------------------------------------------------


class ParseRequest(BaseModel):
    """Request body for POST /reports/parse and POST /sessions/{id}/submit."""

    content: str = Field(description="rdjson or rdjsonl report text")
    format: InputFormat = InputFormat.RDJSON
    base_path: str = Field(default="", description="URL prefix for file links")


class FilterRequest(BaseModel):
    """Request body for PUT /sessions/{id}/filter.  Omitted fields stay unchanged."""

    severity: str | None = None
    source: str | None = None
    rule: str | None = None


class BasePathRequest(BaseModel):
    base_path: str = ""


class ViewerUrlRequest(BaseModel):
    """Request body for POST /reports/viewer-url."""

    content: str
    format: InputFormat = InputFormat.RDJSON
    base_path: str = ""


class ViewerUrlResponse(BaseModel):
    url: str


class QueryResponse(BaseModel):
    """Query string persisted for a session's current input."""

    query: str


class FacetsResponse(BaseModel):
    severities: list[str] = []
    sources: list[str] = []
    rules: list[str] = []


class FilterResponse(BaseModel):
    severity: str = ""
    source: str = ""
    rule: str = ""


class StatsResponse(BaseModel):
    total: int
    per_severity: dict[str, int] = {}


class ViewResponse(BaseModel):
    """Rendering boundary: everything a client needs to draw the viewer."""

    valid: bool
    error: str | None = None
    total: int = 0
    stats: StatsResponse | None = None
    facets: FacetsResponse
    filter: FilterResponse
    diagnostics: list[dict[str, Any]] = []
    cards: list[dict[str, Any]] = []

    @classmethod
    def from_snapshot(cls, snap: ViewerSnapshot) -> ViewResponse:
        return cls(
            valid=snap.collection is not None,
            error=snap.error,
            total=snap.stats.total if snap.stats else 0,
            stats=StatsResponse(**asdict(snap.stats)) if snap.stats else None,
            facets=FacetsResponse(**asdict(snap.facets)),
            filter=FilterResponse(**snap.filter.model_dump()),
            diagnostics=[d.model_dump(exclude_none=True) for d in snap.diagnostics],
            cards=[asdict(c) for c in snap.cards],
        )


# ---------------------------------------------------------------------------
# Session schemas
# ---------------------------------------------------------------------------


class SessionCreateRequest(BaseModel):
    """Request body for POST /sessions."""

    metadata: dict[str, str] = Field(default_factory=dict)


class SessionResponse(BaseModel):
    """Single session info."""

    session_id: str
    created_at: datetime
    last_accessed_at: datetime
    diagnostic_count: int
    metadata: dict[str, str] = Field(default_factory=dict)


class SessionListResponse(BaseModel):
    """Response for GET /sessions."""

    sessions: list[SessionResponse]
