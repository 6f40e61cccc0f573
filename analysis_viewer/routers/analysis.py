"""API routers for analysis sessions and structured-data rendering."""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException, Query, Response

from analysis_viewer.models import (
    AnalysisSessionDetail,
    AnalysisSessionView,
    RenderTree,
    SessionDetailResponse,
    SessionListResponse,
)
from analysis_viewer.renderers.session_view import build_session_view
from analysis_viewer.renderers.structured import render_json
from analysis_viewer.services.analysis_sessions import (
    SessionEnumerationError,
    get_analysis_session_repository,
)

logger = logging.getLogger("analysis_viewer")


async def _load_detail(session_id: str, project_path: str | None) -> AnalysisSessionDetail:
    repo = get_analysis_session_repository(project_path)
    try:
        detail = await repo.get_session(session_id)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Failed to load analysis session %s", session_id)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    if detail is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return detail


# ── Analysis sessions router ───────────────────────────────────────

analysis_router = APIRouter(prefix="/api/analysis", tags=["analysis"])


@analysis_router.get("", response_model=SessionListResponse)
async def list_analysis_sessions(
    project_path: str | None = Query(None, alias="projectPath", description="Project root; defaults to the configured project"),
    q: str = Query("", description="Case-insensitive filter on topic and session id"),
):
    """List analysis sessions, newest first."""
    repo = get_analysis_session_repository(project_path)
    try:
        sessions = await repo.list_sessions(query=q)
    except SessionEnumerationError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except Exception as exc:  # noqa: BLE001
        logger.exception("Failed to list analysis sessions")
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return SessionListResponse(data=sessions, total=len(sessions))


_RAW_ARTIFACT_FIELDS = ("conclusions", "explorations", "perspectives")


def _encode_detail(detail: AnalysisSessionDetail) -> bytes:
    """JSON body for a ``SessionDetailResponse``.

    Raw artifacts are encoded with ``json`` because pydantic's serialiser caps
    nesting depth well below what ``json.loads`` accepts.
    """
    data = detail.model_dump(exclude=set(_RAW_ARTIFACT_FIELDS))
    for field in _RAW_ARTIFACT_FIELDS:
        data[field] = getattr(detail, field)
    payload = {"success": True, "data": data}
    return json.dumps(payload, ensure_ascii=False, allow_nan=False, separators=(",", ":")).encode("utf-8")


@analysis_router.get("/{session_id}", response_model=SessionDetailResponse)
async def get_analysis_session(
    session_id: str,
    project_path: str | None = Query(None, alias="projectPath"),
):
    """Full artifact bundle for one session."""
    detail = await _load_detail(session_id, project_path)
    try:
        body = await asyncio.to_thread(_encode_detail, detail)
    except (ValueError, RecursionError) as exc:
        logger.exception("Failed to encode analysis session %s", session_id)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return Response(body, media_type="application/json")


@analysis_router.get("/{session_id}/view", response_model=AnalysisSessionView)
async def get_analysis_session_view(
    session_id: str,
    project_path: str | None = Query(None, alias="projectPath"),
):
    """Display tabs for one session with every artifact already rendered."""
    detail = await _load_detail(session_id, project_path)
    return build_session_view(detail)


# ── Render router ──────────────────────────────────────────────────

render_router = APIRouter(prefix="/api/render", tags=["render"])


@render_router.post("", response_model=RenderTree)
def render_structured(payload: Any = Body(None)):
    """Render an arbitrary JSON value into a display tree."""
    return render_json(payload)
