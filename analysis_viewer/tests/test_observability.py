import os
import unittest
from unittest.mock import patch

from analysis_viewer import config
from analysis_viewer.observability import otel


class ObservabilityDisabledTests(unittest.TestCase):
    def test_helpers_are_noops_when_disabled(self) -> None:
        with patch.object(otel, "_enabled", False), patch.object(otel, "_prom_enabled", False):
            with otel.start_span("analysis.list_sessions", {"analysis.dir": "/tmp"}) as span:
                self.assertIsNone(span)
            otel.record_session_scan("ok", 12.5, session_count=3)
            otel.record_artifact_failure("conclusions.json", "malformed")

    def test_otlp_endpoint_normalization(self) -> None:
        self.assertEqual(otel._normalize_otlp_endpoint("http://collector:4318", "/v1/traces"), "http://collector:4318/v1/traces")
        self.assertEqual(otel._normalize_otlp_endpoint("http://collector:4318/", "/v1/metrics"), "http://collector:4318/v1/metrics")
        self.assertEqual(otel._normalize_otlp_endpoint("http://collector:4318/v1", "/v1/traces"), "http://collector:4318/v1/traces")
        self.assertEqual(otel._normalize_otlp_endpoint("", "/v1/traces"), "")


class ConfigHelperTests(unittest.TestCase):
    def test_env_helpers_fall_back_on_bad_values(self) -> None:
        with patch.dict(os.environ, {"ANLVIEW_X_INT": "many", "ANLVIEW_X_FLOAT": "soon", "ANLVIEW_X_BOOL": "Yes"}):
            self.assertEqual(config._env_int("ANLVIEW_X_INT", 7), 7)
            self.assertEqual(config._env_float("ANLVIEW_X_FLOAT", 1.5), 1.5)
            self.assertTrue(config._env_bool("ANLVIEW_X_BOOL"))
            self.assertFalse(config._env_bool("ANLVIEW_X_UNSET"))


if __name__ == "__main__":
    unittest.main()
