import unittest

from analysis_viewer.date_utils import is_calendar_date, parse_date_token
from analysis_viewer.parsers.session_identity import SessionIdentity, is_session_id, parse_session_id


class SessionIdentityTests(unittest.TestCase):
    def test_parses_slug_and_date(self) -> None:
        identity = parse_session_id("ANL-my-cool-topic-2026-03-01")

        self.assertEqual(identity, SessionIdentity(slug="my-cool-topic", date="2026-03-01"))
        self.assertEqual(identity.fallback_topic, "my cool topic")

    def test_last_date_token_wins_when_slug_contains_dates(self) -> None:
        identity = parse_session_id("ANL-review-2025-01-01-followup-2026-03-01")

        self.assertIsNotNone(identity)
        assert identity is not None
        self.assertEqual(identity.slug, "review-2025-01-01-followup")
        self.assertEqual(identity.date, "2026-03-01")

    def test_slug_may_be_a_single_word(self) -> None:
        identity = parse_session_id("ANL-auth-2026-01-15")

        self.assertEqual(identity, SessionIdentity(slug="auth", date="2026-01-15"))
        self.assertEqual(identity.fallback_topic, "auth")

    def test_non_conforming_names_are_invalid(self) -> None:
        invalid = [
            "",
            None,
            "ANL-2026-01-01",
            "ANL--2026-01-01",
            "anl-topic-2026-01-01",
            "WFS-topic-2026-01-01",
            "ANL-topic-2026-1-01",
            "ANL-topic-20260101",
            "ANL-topic-2026-01-01-extra",
            "ANL-topic-2026-01-01\n",
            "xANL-topic-2026-01-01",
            " ANL-topic-2026-01-01",
            "ANL-topic-2026-02-30",
            "ANL-topic-2026-13-01",
            "ANL-../../etc-2026-01-01",
            "ANL-a\\b-2026-01-01",
            ".DS_Store",
        ]
        for name in invalid:
            with self.subTest(name=name):
                self.assertIsNone(parse_session_id(name))
                self.assertFalse(is_session_id(name))

    def test_non_string_input_is_invalid(self) -> None:
        self.assertIsNone(parse_session_id(20260101))  # type: ignore[arg-type]


class DateTokenTests(unittest.TestCase):
    def test_strict_calendar_dates(self) -> None:
        self.assertEqual(str(parse_date_token("2024-02-29")), "2024-02-29")
        self.assertTrue(is_calendar_date("2026-12-31"))
        self.assertFalse(is_calendar_date("2025-02-29"))
        self.assertFalse(is_calendar_date("2026-00-10"))
        self.assertFalse(is_calendar_date(" 2026-01-01"))
        self.assertFalse(is_calendar_date("2026-01-01T00:00:00"))
        self.assertFalse(is_calendar_date(None))


if __name__ == "__main__":
    unittest.main()
