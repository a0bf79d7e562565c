"""Stateless report endpoints: parse, open from query parameters, build viewer URLs."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from rdjson_viewer.api.deps import get_settings
from rdjson_viewer.api.schemas import (
    ParseRequest,
    ViewerUrlRequest,
    ViewerUrlResponse,
    ViewResponse,
)
from rdjson_viewer.service.query_params import build_viewer_url
from rdjson_viewer.service.viewer_state import ViewerState
from rdjson_viewer.settings import Settings

router = APIRouter()


@router.post("/parse", response_model=ViewResponse)
async def parse_report(body: ParseRequest) -> ViewResponse:
    """Parse and validate a report without storing it.

    Invalid input is not an HTTP error: the view comes back with
    ``valid=false`` and the ``Invalid format: ...`` message.
    """
    state = ViewerState(base_path=body.base_path)
    state.load(body.content, body.format)
    return ViewResponse.from_snapshot(state.snapshot())


@router.get("/view", response_model=ViewResponse)
async def view_from_query(request: Request) -> ViewResponse:
    """Open a report from ``rdjson`` / ``rdjsonl`` / ``base_path_url`` query parameters."""
    state = ViewerState.from_query_params(request.query_params)
    return ViewResponse.from_snapshot(state.snapshot())


@router.post("/viewer-url", response_model=ViewerUrlResponse)
async def viewer_url(
    body: ViewerUrlRequest,
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> ViewerUrlResponse:
    """Build a shareable viewer URL carrying the compressed report."""
    url = build_viewer_url(
        body.content.encode("utf-8"),
        body.format,
        settings.viewer_base_url,
        base_path=body.base_path,
    )
    return ViewerUrlResponse(url=url)
