"""Tests for gateways/chat.py and gateways/mix_analysis.py with a fake provider."""

from __future__ import annotations

import pytest

from core.config import AssistantSettings
from core.generation.base import OutputTextReply, UnrecognizedReply
from core.mixing.prompts import NO_TRANSCRIPT_PLACEHOLDER
from core.mixing.types import AudioUpload, Message, MixContext
from gateways.chat import CHAT_ERROR_REPLY, EMPTY_REPLY_FALLBACK, ChatGateway
from gateways.mix_analysis import (
    ANALYSIS_ERROR_REPLY,
    DEFAULT_UPLOAD_NAME,
    EMPTY_ANALYSIS_FALLBACK,
    FILE_TOO_LARGE_REPLY,
    NOTHING_TO_ANALYZE_REPLY,
    MixAnalysisGateway,
    normalize_upload,
)

CONTEXT = MixContext()


class TestChatGateway:
    def test_reply_text_returned(self, fake_provider) -> None:
        provider = fake_provider
        provider.reply = OutputTextReply(text="  Tame 3 kHz.  ")
        result = ChatGateway(provider).reply([Message(role="user", content="harsh")], CONTEXT)
        assert result.status_code == 200
        assert result.reply == "Tame 3 kHz."
        assert provider.models == ["gpt-4.1-mini"]
        assert provider.prompts[0].endswith("User: harsh\n\nAssistant:")

    def test_empty_reply_uses_fallback(self, fake_provider) -> None:
        provider = fake_provider
        provider.reply = UnrecognizedReply()
        result = ChatGateway(provider).reply([], CONTEXT)
        assert result.status_code == 200
        assert result.reply == EMPTY_REPLY_FALLBACK

    def test_provider_error_is_500_fixed_message(self, fake_provider) -> None:
        provider = fake_provider
        provider.complete_error = RuntimeError("401 invalid key sk-secret")
        result = ChatGateway(provider).reply([Message(role="user", content="x")], CONTEXT)
        assert result.status_code == 500
        assert result.reply == CHAT_ERROR_REPLY
        assert "sk-secret" not in result.reply

    def test_configured_model(self, fake_provider) -> None:
        provider = fake_provider
        ChatGateway(provider, AssistantSettings(chat_model="gpt-x")).reply([], CONTEXT)
        assert provider.models == ["gpt-x"]


class TestNormalizeUpload:
    def test_keeps_name(self) -> None:
        upload = AudioUpload(filename="song.mp3", data=b"x")
        assert normalize_upload(upload) is upload

    def test_blank_name_defaults(self) -> None:
        assert normalize_upload(AudioUpload(filename=" ", data=b"x")).filename == (
            DEFAULT_UPLOAD_NAME
        )


class TestMixAnalysisGateway:
    @pytest.fixture()
    def provider(self, fake_provider):
        return fake_provider

    def test_nothing_to_analyze_is_400_without_calls(self, provider) -> None:
        result = MixAnalysisGateway(provider).analyze(None, "", CONTEXT)
        assert result.status_code == 400
        assert result.reply == NOTHING_TO_ANALYZE_REPLY
        assert provider.prompts == []
        assert provider.uploads == []

    def test_question_only_coaches(self, provider) -> None:
        result = MixAnalysisGateway(provider).analyze(None, "drum bus glue?", CONTEXT)
        assert result.status_code == 200
        assert provider.uploads == []
        assert len(provider.prompts) == 1
        assert '"drum bus glue?"' in provider.prompts[0]
        assert provider.models == ["gpt-4o-mini"]

    def test_oversize_is_400_without_calls(self, provider) -> None:
        gateway = MixAnalysisGateway(provider, AssistantSettings(max_upload_bytes=4))
        result = gateway.analyze(AudioUpload(filename="a.wav", data=b"12345"), "", CONTEXT)
        assert result.status_code == 400
        assert result.reply == FILE_TOO_LARGE_REPLY
        assert provider.uploads == []
        assert provider.prompts == []

    def test_upload_at_cap_is_accepted(self, provider) -> None:
        gateway = MixAnalysisGateway(provider, AssistantSettings(max_upload_bytes=4))
        result = gateway.analyze(AudioUpload(filename="a.wav", data=b"1234"), "", CONTEXT)
        assert result.status_code == 200

    def test_transcript_in_prompt(self, provider) -> None:
        provider.transcript = "scream scream"
        MixAnalysisGateway(provider).analyze(AudioUpload(filename="a.wav", data=b"x"), "", CONTEXT)
        assert "scream scream" in provider.prompts[0]

    def test_transcript_truncated(self, provider) -> None:
        provider.transcript = "a" * 50
        gateway = MixAnalysisGateway(provider, AssistantSettings(transcript_char_limit=10))
        gateway.analyze(AudioUpload(filename="a.wav", data=b"x"), "", CONTEXT)
        assert "a" * 10 in provider.prompts[0]
        assert "a" * 11 not in provider.prompts[0]

    def test_transcription_failure_degrades(self, provider) -> None:
        provider.transcribe_error = RuntimeError("whisper down")
        result = MixAnalysisGateway(provider).analyze(
            AudioUpload(filename="a.wav", data=b"x"), "low end?", CONTEXT
        )
        assert result.status_code == 200
        assert NO_TRANSCRIPT_PLACEHOLDER in provider.prompts[0]

    def test_unnamed_upload_sent_as_default_name(self, provider) -> None:
        MixAnalysisGateway(provider).analyze(AudioUpload(filename="", data=b"x"), "", CONTEXT)
        assert provider.uploads[0].filename == "mix.wav"

    def test_completion_failure_is_500(self, provider) -> None:
        provider.complete_error = RuntimeError("boom")
        result = MixAnalysisGateway(provider).analyze(
            AudioUpload(filename="a.wav", data=b"x"), "", CONTEXT
        )
        assert result.status_code == 500
        assert result.reply == ANALYSIS_ERROR_REPLY

    def test_empty_analysis_uses_fallback(self, provider) -> None:
        provider.reply = OutputTextReply(text="   ")
        result = MixAnalysisGateway(provider).analyze(
            AudioUpload(filename="a.wav", data=b"x"), "", CONTEXT
        )
        assert result.reply == EMPTY_ANALYSIS_FALLBACK

    def test_transcribe_returns_degraded_value(self, provider) -> None:
        provider.transcribe_error = RuntimeError("nope")
        transcript = MixAnalysisGateway(provider).transcribe(
            AudioUpload(filename="a.wav", data=b"x")
        )
        assert transcript.degraded
        assert transcript.text == ""
