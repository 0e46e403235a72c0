"""
Tests for the structured JSON log formatter
"""

import json
import logging
import sys

from core.logging import JSONFormatter


def _record(msg="Safety analysis done", extra_fields=None, exc_info=None):
    record = logging.LogRecord(
        name="services.safety_monitoring",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    if extra_fields is not None:
        record.extra_fields = extra_fields
    return record


class TestJSONFormatter:

    def test_tags_service_and_environment(self):
        line = JSONFormatter(service="youthlift-api", environment="staging").format(_record())

        data = json.loads(line)
        assert data["service"] == "youthlift-api"
        assert data["environment"] == "staging"
        assert data["level"] == "INFO"
        assert data["logger"] == "services.safety_monitoring"
        assert data["message"] == "Safety analysis done"

    def test_defaults_come_from_settings(self):
        from core.config import settings

        data = json.loads(JSONFormatter().format(_record()))

        assert data["service"] == settings.SERVICE_NAME
        assert data["environment"] == settings.ENVIRONMENT

    def test_extra_fields_merged_without_overwriting(self):
        record = _record(extra_fields={"user_id": "abc", "alert_count": 2, "level": "DEBUG"})

        data = json.loads(JSONFormatter(service="svc", environment="test").format(record))

        assert data["user_id"] == "abc"
        assert data["alert_count"] == 2
        assert data["level"] == "INFO"

    def test_exception_included(self):
        try:
            raise RuntimeError("database is read-only")
        except RuntimeError:
            record = _record(exc_info=sys.exc_info())

        data = json.loads(JSONFormatter(service="svc", environment="test").format(record))

        assert "RuntimeError: database is read-only" in data["exception"]
