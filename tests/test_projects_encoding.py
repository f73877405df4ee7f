"""Tests for core/projects.py — tone/messages encoding and the JSON wire format."""

from datetime import UTC, datetime

import pytest

from core.mixing.types import Message, Tone
from core.projects import (
    Project,
    messages_from_list,
    parse_tone,
    project_from_payload,
    project_to_payload,
    serialize_tone,
)


class TestProject:
    def test_blank_id_raises(self) -> None:
        with pytest.raises(ValueError, match="id"):
            Project(id=" ")

    def test_optional_fields_default_none(self) -> None:
        project = Project(id="x")
        assert project.name is None
        assert project.tone is None


class TestTone:
    def test_serialize_none(self) -> None:
        assert serialize_tone(None) is None

    def test_serialize_parse(self) -> None:
        tone = Tone(tightness="ultra-tight")
        assert parse_tone(serialize_tone(tone)) == tone

    def test_parse_mapping(self) -> None:
        assert parse_tone({"brightness": "dark"}) == Tone(brightness="dark")

    def test_blank_field_takes_default(self) -> None:
        raw = '{"aggression": "  ", "tightness": "loose", "brightness": ""}'
        assert parse_tone(raw) == Tone(tightness="loose")

    @pytest.mark.parametrize("raw", [None, "", "oops", "42", '["a"]', '{"tightness": "wobbly"}'])
    def test_parse_failures_yield_none(self, raw) -> None:
        assert parse_tone(raw) is None


class TestMessages:
    def test_unknown_roles_skipped(self) -> None:
        messages = messages_from_list(
            [{"role": "user", "content": "a"}, {"role": "system", "content": "b"}, "junk"]
        )
        assert messages == (Message(role="user", content="a"),)

    def test_json_text_accepted(self) -> None:
        assert messages_from_list('[{"role": "assistant", "content": "hi"}]') == (
            Message(role="assistant", content="hi"),
        )

    def test_none_and_garbage(self) -> None:
        assert messages_from_list(None) is None
        assert messages_from_list("{bad") is None
        assert messages_from_list({"role": "user"}) is None


class TestPayload:
    def test_camel_case_keys(self) -> None:
        payload = project_to_payload(
            Project(
                id="p",
                preset_id="thrash",
                mix_file_name="a.wav",
                created_at=datetime(2026, 3, 1, tzinfo=UTC),
            )
        )
        assert payload["presetId"] == "thrash"
        assert payload["mixFileName"] == "a.wav"
        assert payload["created_at"] == "2026-03-01T00:00:00+00:00"
        assert payload["tone"] is None

    def test_from_payload(self) -> None:
        project = project_from_payload(
            {
                "id": "p",
                "messages": [{"role": "user", "content": "q"}],
                "tone": {"aggression": "low"},
                "presetId": "club",
                "created_at": "2026-03-01T00:00:00+00:00",
            }
        )
        assert project.messages == (Message(role="user", content="q"),)
        assert project.tone == Tone(aggression="low")
        assert project.preset_id == "club"
        assert project.created_at == datetime(2026, 3, 1, tzinfo=UTC)

    def test_from_payload_missing_id_raises(self) -> None:
        with pytest.raises(ValueError):
            project_from_payload({"name": "no id"})
