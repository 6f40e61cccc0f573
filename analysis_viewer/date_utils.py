"""Shared date token helpers."""
from __future__ import annotations

import re
from datetime import date

_DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date_token(token: str | None) -> date | None:
    """Parse a strict ``YYYY-MM-DD`` token into a calendar date.

    Returns ``None`` for anything that is not exactly ten characters of that
    shape or that names a day which does not exist (``2026-02-30``).
    """
    cleaned = (token or "").strip()
    if cleaned != (token or "") or not _DATE_ONLY_RE.match(cleaned):
        return None
    try:
        return date.fromisoformat(cleaned)
    except ValueError:
        return None


def is_calendar_date(token: str | None) -> bool:
    return parse_date_token(token) is not None
