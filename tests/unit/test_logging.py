"""
Unit tests for structured logging processors.
"""

from shared.logging import (
    REDACTED,
    add_correlation_context,
    add_service_context,
    clear_context,
    redact_sensitive_fields,
    set_request_id,
    set_user_context,
)


def test_credentials_are_redacted():
    event = redact_sensitive_fields(None, "info", {
        "event": "Login rejected",
        "password": "hunter2",
        "authorization": "Bearer abc",
        "email": "a@example.com",
    })

    assert event["password"] == REDACTED
    assert event["authorization"] == REDACTED
    assert event["email"] == "a@example.com"


def test_empty_values_kept():
    event = redact_sensitive_fields(None, "info", {"event": "x", "token": ""})

    assert event["token"] == ""


def test_service_from_logger_name():
    event = add_service_context(None, "info", {"logger": "geo.engine"})

    assert event["service"] == "geo"


def test_correlation_context():
    request_id = set_request_id()
    set_user_context("user-1")
    try:
        event = add_correlation_context(None, "info", {"event": "x"})
    finally:
        clear_context()

    assert event["request_id"] == request_id
    assert event["user_id"] == "user-1"
    assert add_correlation_context(None, "info", {"event": "x"}) == {"event": "x"}


def test_request_id_kept_when_given():
    try:
        assert set_request_id("req-1") == "req-1"
    finally:
        clear_context()
