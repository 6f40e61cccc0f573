import unittest

from analysis_viewer.models import AnalysisSessionDetail
from analysis_viewer.renderers.session_view import build_session_view


def _detail(**artifacts) -> AnalysisSessionDetail:
    return AnalysisSessionDetail(
        id="ANL-auth-2026-01-01",
        name="ANL-auth-2026-01-01",
        topic="auth",
        createdAt="2026-01-01",
        status="completed" if artifacts.get("conclusions") is not None else "in_progress",
        hasConclusions=artifacts.get("conclusions") is not None,
        **artifacts,
    )


class SessionViewTests(unittest.TestCase):
    def test_tabs_follow_panel_order(self) -> None:
        view = build_session_view(
            _detail(
                perspectives={"perspectives": []},
                conclusions={"topic": "Auth"},
                discussion="# Round 1",
                explorations={"key_findings": ["f1"]},
            )
        )

        self.assertEqual([tab.id for tab in view.tabs], ["discussion", "conclusions", "explorations", "perspectives"])
        self.assertEqual([tab.format for tab in view.tabs], ["markdown", "structured", "structured", "structured"])
        self.assertEqual(view.defaultTab, "discussion")
        self.assertIsNotNone(view.tabs[0].document)
        self.assertIsNone(view.tabs[0].tree)
        explorations = view.tabs[2].tree
        self.assertEqual(explorations.children(explorations.root)[0].items, ["f1"])

    def test_only_present_artifacts_become_tabs(self) -> None:
        view = build_session_view(_detail(explorations={"dimensions": ["perf"]}, discussion=""))

        self.assertEqual([tab.id for tab in view.tabs], ["explorations"])
        self.assertEqual(view.defaultTab, "explorations")
        self.assertEqual(view.status, "in_progress")

    def test_empty_object_artifacts_still_show(self) -> None:
        view = build_session_view(_detail(conclusions={}))

        self.assertEqual([tab.id for tab in view.tabs], ["conclusions"])
        self.assertEqual(view.tabs[0].tree.root.kind, "empty_object")

    def test_no_artifacts_means_no_default_tab(self) -> None:
        view = build_session_view(_detail())

        self.assertEqual(view.tabs, [])
        self.assertIsNone(view.defaultTab)
        self.assertEqual(view.topic, "auth")


if __name__ == "__main__":
    unittest.main()
