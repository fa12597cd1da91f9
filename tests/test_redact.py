from __future__ import annotations

from pyswcache._redact import redact_for_log, redact_url


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "type": "CLEAR_CACHE",
        "headers": {"Authorization": "Bearer abc", "Cookie": "sid=1", "Accept": "text/html"},
        "body": b"secret-bytes",
    }

    redacted = redact_for_log(payload)
    assert redacted["type"] == "CLEAR_CACHE"
    assert redacted["headers"]["Authorization"] == "<redacted>"
    assert redacted["headers"]["Cookie"] == "<redacted>"
    assert redacted["headers"]["Accept"] == "text/html"
    assert redacted["body"] == "<bytes:12b>"


def test_redact_url_masks_token_query_parameters() -> None:
    url = "http://shop.test/api/checkout?token=abc123&step=2"
    redacted = redact_url(url)
    assert "abc123" not in redacted
    assert "step=2" in redacted
    assert redact_url("http://shop.test/api/cart") == "http://shop.test/api/cart"


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]
