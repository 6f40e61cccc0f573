"""Filesystem-backed repository for analysis sessions.

Sessions live under ``<project>/.workflow/.analysis/ANL-<slug>-<YYYY-MM-DD>/``
and are written by an external workflow while this service reads them. Nothing
is cached: every call re-reads the directory so a session that finishes between
two requests shows up as completed on the second one.
"""
from __future__ import annotations

import asyncio
import logging
import os
import time
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from analysis_viewer import config
from analysis_viewer.models import (
    AnalysisSessionDetail,
    AnalysisSessionSummary,
    ConclusionsHeader,
    SessionStatus,
)
from analysis_viewer.observability import record_session_scan, start_span
from analysis_viewer.parsers.artifacts import path_exists, path_is_dir, read_structured, read_text
from analysis_viewer.parsers.session_identity import SessionIdentity, parse_session_id
from analysis_viewer.project_manager import analysis_dir_for, project_manager

logger = logging.getLogger("analysis_viewer.sessions")


class SessionEnumerationError(RuntimeError):
    """The analysis directory exists but its entries could not be listed."""


def declared_topic(conclusions: dict[str, Any] | None) -> str | None:
    """Return the non-blank string ``topic`` declared by a conclusions document."""
    if not conclusions:
        return None
    try:
        header = ConclusionsHeader.model_validate(conclusions)
    except ValidationError:
        # Other declared fields may be off-shape; the topic alone still counts.
        try:
            header = ConclusionsHeader.model_validate({"topic": conclusions.get("topic")})
        except ValidationError:
            return None
    topic = header.topic
    if not topic or not topic.strip():
        return None
    return topic


def derive_topic(identity: SessionIdentity, conclusions: dict[str, Any] | None) -> str:
    return declared_topic(conclusions) or identity.fallback_topic


def derive_status(conclusions: dict[str, Any] | None) -> SessionStatus:
    return "completed" if conclusions is not None else "in_progress"


def session_sort_key(summary: AnalysisSessionSummary) -> tuple[str, str]:
    # Same-day sessions fall back to the folder name so ordering stays total.
    return summary.createdAt, summary.id


def matches_query(summary: AnalysisSessionSummary, query: str | None) -> bool:
    needle = (query or "").strip().lower()
    if not needle:
        return True
    return needle in summary.topic.lower() or needle in summary.id.lower()


def _list_child_names(directory: Path) -> list[str]:
    with os.scandir(directory) as entries:
        return [entry.name for entry in entries]


class AnalysisSessionRepository:
    """Read-only view over one project's analysis sessions."""

    def __init__(self, project_root: str | Path):
        self.project_root = Path(project_root)
        self.analysis_dir = analysis_dir_for(self.project_root)

    async def list_sessions(self, query: str | None = None) -> list[AnalysisSessionSummary]:
        """Summaries for every valid session folder, newest first.

        A project without an analysis directory yields an empty list. Raises
        ``SessionEnumerationError`` only when the directory exists but cannot
        be listed; problems inside a single session folder drop that folder.
        """
        started = time.perf_counter()
        with start_span("analysis.list_sessions", {"analysis.dir": str(self.analysis_dir)}):
            if not await path_exists(self.analysis_dir):
                record_session_scan("missing_dir", (time.perf_counter() - started) * 1000)
                return []

            try:
                names = await asyncio.to_thread(_list_child_names, self.analysis_dir)
            except OSError as exc:
                logger.exception("Failed to enumerate analysis directory %s", self.analysis_dir)
                record_session_scan("error", (time.perf_counter() - started) * 1000)
                raise SessionEnumerationError(
                    f"Failed to read analysis directory {self.analysis_dir}: {exc}"
                ) from exc

            semaphore = asyncio.Semaphore(max(1, config.LIST_CONCURRENCY))

            async def _bounded(folder_name: str) -> Optional[AnalysisSessionSummary]:
                async with semaphore:
                    return await self._summarize_safely(folder_name)

            results = await asyncio.gather(*(_bounded(name) for name in names))
            sessions = [summary for summary in results if summary is not None and matches_query(summary, query)]
            sessions.sort(key=session_sort_key, reverse=True)

        record_session_scan("ok", (time.perf_counter() - started) * 1000, session_count=len(sessions))
        return sessions

    async def _summarize_safely(self, folder_name: str) -> Optional[AnalysisSessionSummary]:
        identity = parse_session_id(folder_name)
        if identity is None:
            return None
        try:
            return await self._build_summary(folder_name, identity)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Skipping analysis session %s: %s", folder_name, exc)
            return None

    async def _build_summary(
        self, folder_name: str, identity: SessionIdentity
    ) -> Optional[AnalysisSessionSummary]:
        session_dir = self.analysis_dir / folder_name
        if not await path_is_dir(session_dir):
            return None
        conclusions = await read_structured(session_dir / config.CONCLUSIONS_FILE)
        return AnalysisSessionSummary(
            id=folder_name,
            name=folder_name,
            topic=derive_topic(identity, conclusions),
            createdAt=identity.date,
            status=derive_status(conclusions),
            hasConclusions=conclusions is not None,
        )

    async def get_session(self, session_id: str) -> Optional[AnalysisSessionDetail]:
        """Full artifact bundle for *session_id*, or ``None`` when not found."""
        identity = parse_session_id(session_id)
        if identity is None:
            return None

        session_dir = self.analysis_dir / session_id
        with start_span("analysis.get_session", {"analysis.session_id": session_id}):
            if not await path_is_dir(session_dir):
                return None

            discussion, conclusions, explorations, perspectives = await asyncio.gather(
                read_text(session_dir / config.DISCUSSION_FILE),
                read_structured(session_dir / config.CONCLUSIONS_FILE),
                read_structured(session_dir / config.EXPLORATIONS_FILE),
                read_structured(session_dir / config.PERSPECTIVES_FILE),
            )

        return AnalysisSessionDetail(
            id=session_id,
            name=session_id,
            topic=derive_topic(identity, conclusions),
            createdAt=identity.date,
            status=derive_status(conclusions),
            hasConclusions=conclusions is not None,
            discussion=discussion,
            conclusions=conclusions,
            explorations=explorations,
            perspectives=perspectives,
        )


def get_analysis_session_repository(project_path: str | None = None) -> AnalysisSessionRepository:
    return AnalysisSessionRepository(project_manager.resolve_project_root(project_path))
