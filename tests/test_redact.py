from __future__ import annotations

from pycarapp._redact import redact_for_log


def test_redact_for_log_redacts_credentials() -> None:
    payload = {
        "username": "alice",
        "password": "pw",
        "access_token": "t1",
        "user": {"username": "alice", "token": "nested"},
        "headers": [{"Authorization": "Bearer t1"}],
    }

    redacted = redact_for_log(payload)

    assert redacted["username"] == "alice"
    assert redacted["password"] == "<redacted>"
    assert redacted["access_token"] == "<redacted>"
    assert redacted["user"] == {"username": "alice", "token": "<redacted>"}
    assert redacted["headers"] == [{"Authorization": "<redacted>"}]


def test_redact_for_log_truncates_long_strings() -> None:
    redacted = redact_for_log({"name": "x" * 600}, max_string=10)
    assert redacted["name"].startswith("x" * 10)
    assert "<truncated>" in redacted["name"]


def test_redact_for_log_passes_scalars_through() -> None:
    assert redact_for_log(None) is None
    assert redact_for_log(42) == 42
    assert redact_for_log([1, "a"]) == [1, "a"]
