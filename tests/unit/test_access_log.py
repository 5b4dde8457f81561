"""
Unit tests for access logging.
"""

import json
import logging
import time

import pytest

from fileserver.access_log import AccessLog, RequestLog


def make_entry(**overrides) -> RequestLog:
    fields = dict(
        client_ip="127.0.0.1",
        method="GET",
        path="/index.html",
        status_code=200,
        content_length=5,
        duration_ms=0.4167,
        timestamp="19/Oct/2026:10:00:00 +0000",
    )
    fields.update(overrides)
    return RequestLog(**fields)


class TestRequestLog:

    def test_to_text(self):
        assert make_entry().to_text() == (
            '127.0.0.1 - - [19/Oct/2026:10:00:00 +0000] "GET /index.html" 200 5 0.42ms'
        )

    def test_to_dict_rounds_duration(self):
        data = make_entry().to_dict()
        assert data["duration_ms"] == 0.42
        assert data["status_code"] == 200
        assert set(data) == {
            "client_ip", "method", "path", "status_code",
            "content_length", "duration_ms", "timestamp",
        }


class TestAccessLog:

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            AccessLog(log_format="xml")

    def test_record_text(self, caplog):
        with caplog.at_level(logging.INFO, logger="fileserver.access"):
            entry = AccessLog().record("10.0.0.2", "GET", "/a", 404, 0, time.time())

        assert entry.status_code == 404
        assert entry.duration_ms >= 0
        [record] = [r for r in caplog.records if r.name == "fileserver.access"]
        assert '10.0.0.2 - - [' in record.getMessage()
        assert '"GET /a" 404 0' in record.getMessage()

    def test_record_json(self, caplog):
        with caplog.at_level(logging.INFO, logger="fileserver.access"):
            AccessLog(log_format="json").record("10.0.0.2", "GET", "/a", 200, 3, time.time())

        [record] = [r for r in caplog.records if r.name == "fileserver.access"]
        data = json.loads(record.getMessage())
        assert data["path"] == "/a"
        assert data["content_length"] == 3

    def test_unparsed_request_uses_dashes(self):
        entry = AccessLog().record("-", None, None, 404, 0, time.time())
        assert entry.method == "-"
        assert entry.path == "-"

    def test_custom_level(self, caplog):
        with caplog.at_level(logging.INFO, logger="fileserver.access"):
            AccessLog(log_level=logging.DEBUG).record("-", "GET", "/", 200, 0, time.time())

        assert not [r for r in caplog.records if r.name == "fileserver.access"]
