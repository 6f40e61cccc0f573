"""Fault-tolerant readers for session artifacts written by the analysis workflow.

Artifacts may be missing, half-written or unreadable while the external
workflow is still running. Every public reader here collapses all of those
cases to ``None``; the specific reason is only used for logging and metrics.
"""
from __future__ import annotations

import asyncio
import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any

from analysis_viewer import config
from analysis_viewer.observability import record_artifact_failure

logger = logging.getLogger("analysis_viewer.artifacts")


class ArtifactReadOutcome(str, Enum):
    OK = "ok"
    MISSING = "missing"
    UNREADABLE = "unreadable"
    MALFORMED = "malformed"
    NOT_AN_OBJECT = "not_an_object"
    TOO_LARGE = "too_large"
    TIMED_OUT = "timed_out"


def _note_failure(path: Path, outcome: ArtifactReadOutcome, detail: Any = None) -> None:
    if outcome == ArtifactReadOutcome.MISSING:
        logger.debug("Artifact missing: %s", path)
        return
    logger.warning("Artifact %s treated as absent (%s): %s", path, outcome.value, detail or "")
    record_artifact_failure(path.name, outcome.value)


def _read_text_sync(path: Path, max_bytes: int) -> tuple[str | None, ArtifactReadOutcome, Any]:
    try:
        if not path.is_file():
            return None, ArtifactReadOutcome.MISSING, None
        size = path.stat().st_size
        if max_bytes > 0 and size > max_bytes:
            return None, ArtifactReadOutcome.TOO_LARGE, f"{size} bytes"
        return path.read_text(encoding="utf-8"), ArtifactReadOutcome.OK, None
    except FileNotFoundError:
        # Removed between the existence check and the read.
        return None, ArtifactReadOutcome.MISSING, None
    except (OSError, UnicodeDecodeError) as exc:
        return None, ArtifactReadOutcome.UNREADABLE, exc


def read_text_with_outcome(
    path: Path, max_bytes: int | None = None
) -> tuple[str | None, ArtifactReadOutcome]:
    """Read a UTF-8 text artifact, returning ``(text, outcome)``."""
    limit = config.ARTIFACT_MAX_BYTES if max_bytes is None else max_bytes
    text, outcome, detail = _read_text_sync(path, limit)
    if outcome != ArtifactReadOutcome.OK:
        _note_failure(path, outcome, detail)
    return text, outcome


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def read_json_with_outcome(
    path: Path, max_bytes: int | None = None
) -> tuple[dict[str, Any] | None, ArtifactReadOutcome]:
    """Read and decode a JSON object artifact, returning ``(data, outcome)``."""
    limit = config.ARTIFACT_MAX_BYTES if max_bytes is None else max_bytes
    text, outcome, detail = _read_text_sync(path, limit)
    if outcome != ArtifactReadOutcome.OK:
        _note_failure(path, outcome, detail)
        return None, outcome
    try:
        parsed = json.loads(text or "", parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        # ValueError covers JSONDecodeError, NaN/Infinity and the int digit limit.
        _note_failure(path, ArtifactReadOutcome.MALFORMED, exc)
        return None, ArtifactReadOutcome.MALFORMED
    if not isinstance(parsed, dict):
        _note_failure(path, ArtifactReadOutcome.NOT_AN_OBJECT, type(parsed).__name__)
        return None, ArtifactReadOutcome.NOT_AN_OBJECT
    return parsed, ArtifactReadOutcome.OK


async def _run_bounded(func, path: Path, timeout: float | None):
    limit = config.ARTIFACT_READ_TIMEOUT_SECONDS if timeout is None else timeout
    call = asyncio.to_thread(func, path)
    if limit <= 0:
        return await call
    try:
        return await asyncio.wait_for(call, timeout=limit)
    except asyncio.TimeoutError:
        _note_failure(path, ArtifactReadOutcome.TIMED_OUT, f"after {limit}s")
        return None, ArtifactReadOutcome.TIMED_OUT


async def read_text(path: Path, timeout: float | None = None) -> str | None:
    text, _ = await _run_bounded(read_text_with_outcome, path, timeout)
    return text


async def read_structured(path: Path, timeout: float | None = None) -> dict[str, Any] | None:
    data, _ = await _run_bounded(read_json_with_outcome, path, timeout)
    return data


async def path_exists(path: Path) -> bool:
    try:
        return await asyncio.to_thread(path.exists)
    except OSError:
        return False


async def path_is_dir(path: Path) -> bool:
    try:
        return await asyncio.to_thread(path.is_dir)
    except OSError:
        return False
