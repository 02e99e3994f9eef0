# tests/unit/test_conversation_rules.py
"""Unit tests for pure conversation helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from agent_chat.domain.exceptions import ValidationError
from agent_chat.infrastructure.database.base_model import as_utc, utcnow
from agent_chat.infrastructure.database.models import Message, MessageRole, UserAgent
from agent_chat.services.conversation import clean_content, parse_role
from agent_chat.services.entitlements import is_expired
from agent_chat.services.orchestrator import clean_title, format_prompt


def _message(role: str, content: str, id: str) -> Message:
    return Message(id=id, chat_id="chat-1", user_id="user-1", role=role, content=content)


@pytest.mark.unit
class TestIsExpired:

    def test_no_expiry_never_expires(self):
        assert not is_expired(UserAgent(user_id="u", agent_id="a", expires_at=None), utcnow())

    def test_past_expiry(self):
        now = utcnow()
        grant = UserAgent(user_id="u", agent_id="a", expires_at=now - timedelta(seconds=1))
        assert is_expired(grant, now)

    def test_expiry_at_now_counts_as_expired(self):
        now = utcnow()
        assert is_expired(UserAgent(user_id="u", agent_id="a", expires_at=now), now)

    def test_future_expiry(self):
        now = utcnow()
        grant = UserAgent(user_id="u", agent_id="a", expires_at=now + timedelta(days=1))
        assert not is_expired(grant, now)

    def test_naive_expiry_read_as_utc(self):
        now = utcnow()
        naive = (now - timedelta(minutes=5)).replace(tzinfo=None)
        assert is_expired(UserAgent(user_id="u", agent_id="a", expires_at=naive), now)


@pytest.mark.unit
class TestContentRules:

    @pytest.mark.parametrize("content", ["", "   ", "\n\t", None])
    def test_blank_content_rejected(self, content):
        with pytest.raises(ValidationError):
            clean_content(content)

    def test_content_trimmed(self):
        assert clean_content("  hi \n") == "hi"

    def test_role_parsing(self):
        assert parse_role("assistant") is MessageRole.ASSISTANT
        assert parse_role(MessageRole.SYSTEM) is MessageRole.SYSTEM

    def test_unknown_role(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_role("tool")
        assert exc_info.value.details["value"] == "tool"

    def test_datetimes_normalised_to_utc(self):
        aware = datetime(2030, 1, 1, 12, tzinfo=timezone(timedelta(hours=2)))
        assert as_utc(aware) == datetime(2030, 1, 1, 10, tzinfo=timezone.utc)
        assert as_utc(datetime(2030, 1, 1, 10)).tzinfo is timezone.utc
        assert as_utc(None) is None


@pytest.mark.unit
class TestFormatPrompt:

    def test_system_prompt_leads(self):
        latest = _message("user", "Hello", "m1")

        prompt = format_prompt("Be brief.", [latest], latest)

        assert prompt == [
            {"role": "system", "content": "Be brief."},
            {"role": "user", "content": "Hello"},
        ]

    def test_latest_appended_once(self):
        history = [_message("user", "Hi", "m1"), _message("assistant", "Hello!", "m2")]
        latest = _message("user", "How are you?", "m3")

        with_latest = format_prompt("sys", history + [latest], latest)
        without_latest = format_prompt("sys", history, latest)

        assert with_latest == without_latest
        assert [turn["content"] for turn in with_latest] == ["sys", "Hi", "Hello!", "How are you?"]

    def test_stored_system_turns_skipped(self):
        history = [_message("system", "note", "m1"), _message("user", "Hi", "m2")]

        prompt = format_prompt("sys", history, history[-1])

        assert [turn["role"] for turn in prompt] == ["system", "user"]


@pytest.mark.unit
class TestCleanTitle:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ('"Trip Planning"', "Trip Planning"),
            ("  Python Help.  ", "Python Help"),
            ("'Recipe Ideas'\n", "Recipe Ideas"),
            ("   ", ""),
        ],
    )
    def test_cleaning(self, raw, expected):
        assert clean_title(raw) == expected
