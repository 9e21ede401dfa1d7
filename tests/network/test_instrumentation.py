"""Tests for transport observers and URL redaction."""

import logging

import httpx

from EndpointKit.network.instrumentation import LoggingObserver, _redact_url, notify


def test_redact_url_drops_query_and_fragment():
    assert _redact_url("https://reqres.in/api/users?page=2&api_key=s3cr3t#top") == "https://reqres.in/api/users"


def test_notify_ignores_missing_observer_and_callbacks():
    notify(None, "request_started", object())
    notify(object(), "request_started", object())


def test_notify_swallows_observer_errors(caplog):
    class Broken:
        def request_started(self, request):
            raise RuntimeError("boom")

    with caplog.at_level(logging.DEBUG, logger="EndpointKit.network.instrumentation"):
        notify(Broken(), "request_started", object())
    assert any("request_started" in record.getMessage() for record in caplog.records)


class TestLoggingObserver:
    def setup_method(self):
        self.request = httpx.Request("GET", "https://reqres.in/api/users?token=abc")

    def test_finished_record_carries_structured_fields(self, caplog):
        observer = LoggingObserver()
        with caplog.at_level(logging.INFO, logger="EndpointKit.network.instrumentation"):
            observer.request_finished(self.request, 200, 0.0125)
        record = caplog.records[-1]
        assert record.getMessage() == "net.request"
        assert record.extra_fields == {
            "method": "GET",
            "url_redacted": "https://reqres.in/api/users",
            "host": "reqres.in",
            "status": 200,
            "elapsed_ms": 12.5,
        }

    def test_failed_record_is_warning(self, caplog):
        observer = LoggingObserver(level=logging.DEBUG)
        with caplog.at_level(logging.DEBUG, logger="EndpointKit.network.instrumentation"):
            observer.request_failed(self.request, httpx.ConnectError("down"), 0.5)
        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.extra_fields["error"] == "ConnectError"

    def test_custom_logger(self, caplog):
        custom = logging.getLogger("tests.observer")
        observer = LoggingObserver(log=custom)
        with caplog.at_level(logging.DEBUG, logger="tests.observer"):
            observer.request_started(self.request)
        assert caplog.records[-1].name == "tests.observer"
        assert caplog.records[-1].getMessage() == "net.request.start"
