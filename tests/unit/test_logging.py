# tests/unit/test_logging.py
"""Unit tests for log masking processors."""

import pytest

from agent_chat.infrastructure.observability.logging import (
    mask_pii_value,
    mask_secret_value,
    mask_secrets_processor,
)


@pytest.mark.unit
class TestMasking:

    def test_email_masked(self):
        assert mask_pii_value("login by ada@example.com") == "login by ***@***"

    def test_provider_keys_masked(self):
        assert mask_secret_value("key sk-abcdefghijklmnopqrstuv") == "key ***"
        assert mask_secret_value("gsk_ABCDEFGHIJKLMNOPQRST") == "***"

    def test_secret_fields_replaced(self):
        event = mask_secrets_processor(None, "info", {
            "event": "Provider configured",
            "openai_api_key": "sk-live",
            "nested": {"note": "uses sk-abcdefghijklmnopqrstuv"},
        })

        assert event["openai_api_key"] == "***"
        assert event["nested"]["note"] == "uses ***"
        assert event["event"] == "Provider configured"
