"""Analysis Viewer Backend Configuration."""
import os
from pathlib import Path


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


# Default project root when a caller does not pass one
PROJECT_PATH = os.getenv("ANLVIEW_PROJECT_PATH", str(Path.cwd()))

# On-disk artifact layout (owned by the external analysis workflow)
ANALYSIS_DIR_PARTS = (".workflow", ".analysis")
SESSION_PREFIX = "ANL"
DISCUSSION_FILE = "discussion.md"
CONCLUSIONS_FILE = "conclusions.json"
EXPLORATIONS_FILE = "explorations.json"
PERSPECTIVES_FILE = "perspectives.json"

# Read limits
ARTIFACT_MAX_BYTES = _env_int("ANLVIEW_ARTIFACT_MAX_BYTES", 16 * 1024 * 1024)
ARTIFACT_READ_TIMEOUT_SECONDS = _env_float("ANLVIEW_ARTIFACT_READ_TIMEOUT_SECONDS", 10.0)
LIST_CONCURRENCY = _env_int("ANLVIEW_LIST_CONCURRENCY", 16)

# Observability
OTEL_ENABLED = _env_bool("ANLVIEW_OTEL_ENABLED", False)
OTEL_ENDPOINT = os.getenv("ANLVIEW_OTEL_ENDPOINT", "http://localhost:4318")
OTEL_SERVICE_NAME = os.getenv("ANLVIEW_OTEL_SERVICE_NAME", "analysis-viewer")
PROM_PORT = _env_int("ANLVIEW_PROM_PORT", 0)

# CORS
FRONTEND_ORIGIN = os.getenv("ANLVIEW_FRONTEND_ORIGIN", "http://localhost:3000")
