"""Assemble the tabbed display model for one analysis session."""
from __future__ import annotations

from analysis_viewer.models import AnalysisSessionDetail, AnalysisSessionView, SessionViewTab
from analysis_viewer.renderers.markdown import render_markdown
from analysis_viewer.renderers.structured import render_json

# Tab order as shown in the session detail panel.
_STRUCTURED_TABS = (
    ("conclusions", "Conclusions"),
    ("explorations", "Explorations"),
    ("perspectives", "Perspectives"),
)


def build_session_view(detail: AnalysisSessionDetail) -> AnalysisSessionView:
    """Tabs for every artifact that has content; the first one is the default."""
    tabs: list[SessionViewTab] = []
    if detail.discussion:
        tabs.append(
            SessionViewTab(
                id="discussion",
                label="Discussion",
                format="markdown",
                document=render_markdown(detail.discussion),
            )
        )
    for tab_id, label in _STRUCTURED_TABS:
        payload = getattr(detail, tab_id)
        if payload is None:
            continue
        tabs.append(SessionViewTab(id=tab_id, label=label, format="structured", tree=render_json(payload)))

    return AnalysisSessionView(
        id=detail.id,
        topic=detail.topic,
        createdAt=detail.createdAt,
        status=detail.status,
        tabs=tabs,
        defaultTab=tabs[0].id if tabs else None,
    )
