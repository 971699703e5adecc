from __future__ import annotations

from pyklaviyo._redact import redact_for_log


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "authorization": "Klaviyo-API-Key pk_live_123",
        "revision": "2024-10-15",
        "Signature-Key": "whsec_abc",
        "data": {"attributes": {"email": "ada@example.com", "api_key": "pk_live_123"}},
        "password": "pw",
    }

    redacted = redact_for_log(payload)
    assert redacted["authorization"] == "<redacted>"
    assert redacted["Signature-Key"] == "<redacted>"
    assert redacted["password"] == "<redacted>"
    assert redacted["revision"] == "2024-10-15"
    assert redacted["data"]["attributes"]["api_key"] == "<redacted>"
    assert redacted["data"]["attributes"]["email"] == "ada@example.com"


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_walks_resource_lists() -> None:
    document = {"data": [{"type": "webhook", "attributes": {"url": "https://example.com", "secret_key": "whsec"}}]}

    redacted = redact_for_log(document)
    assert redacted["data"][0]["attributes"] == {"url": "https://example.com", "secret_key": "<redacted>"}
    assert redact_for_log(None) is None
    assert document["data"][0]["attributes"]["secret_key"] == "whsec"
