"""Decode analysis session folder names into structured identities."""
from __future__ import annotations

import re
from dataclasses import dataclass

from analysis_viewer import config
from analysis_viewer.date_utils import is_calendar_date

# Greedy slug group: when the slug itself holds date-like text the final
# ten-character date token is the one captured as the creation date.
_SESSION_ID_RE = re.compile(
    rf"^{re.escape(config.SESSION_PREFIX)}-(.+)-(\d{{4}}-\d{{2}}-\d{{2}})$"
)
# Folder names never contain these; an identifier that does is not a session.
_PATH_SEPARATORS = ("/", "\\", "\x00")


@dataclass(frozen=True)
class SessionIdentity:
    slug: str
    date: str

    @property
    def fallback_topic(self) -> str:
        return self.slug.replace("-", " ")


def parse_session_id(folder_name: str | None) -> SessionIdentity | None:
    """Return the identity encoded in ``ANL-<slug>-<YYYY-MM-DD>`` or ``None``.

    ``None`` means "not a session"; callers skip such names rather than
    treating them as failures.
    """
    if not folder_name or not isinstance(folder_name, str):
        return None
    match = _SESSION_ID_RE.fullmatch(folder_name)
    if not match:
        return None
    slug, date_token = match.group(1), match.group(2)
    if any(sep in slug for sep in _PATH_SEPARATORS):
        return None
    if not slug or not is_calendar_date(date_token):
        return None
    return SessionIdentity(slug=slug, date=date_token)


def is_session_id(folder_name: str | None) -> bool:
    return parse_session_id(folder_name) is not None
