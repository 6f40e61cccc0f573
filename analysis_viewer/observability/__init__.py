"""Observability helpers."""

from analysis_viewer.observability.otel import (
    initialize,
    shutdown,
    start_span,
    record_artifact_failure,
    record_session_scan,
)

__all__ = [
    "initialize",
    "shutdown",
    "start_span",
    "record_artifact_failure",
    "record_session_scan",
]
