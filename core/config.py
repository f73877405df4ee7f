"""
Configuration dataclass for the gateways.

An immutable settings object decouples model names and limits from the
route handlers, so every downstream component receives fully populated,
already validated values.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

MIB = 1024 * 1024


@dataclass(frozen=True)
class AssistantSettings:
    """
    Settings shared by the chat and mix-analysis gateways.

    Attributes:
        chat_model: Completion model for ``POST /api/chat``.
        analysis_model: Completion model for ``POST /api/analyze-mix``.
        transcription_model: Speech-to-text model used on uploaded mixes.
        max_upload_bytes: Largest accepted upload. Defaults to 200 MiB.
        transcript_char_limit: Transcript characters kept in the analysis
            prompt. Defaults to 4000.

    Example:
        >>> settings = AssistantSettings(max_upload_bytes=50 * MIB)
    """

    chat_model: str = "gpt-4.1-mini"
    analysis_model: str = "gpt-4o-mini"
    transcription_model: str = "whisper-1"
    max_upload_bytes: int = 200 * MIB
    transcript_char_limit: int = 4000

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        for name in ("chat_model", "analysis_model", "transcription_model"):
            if not getattr(self, name).strip():
                raise ValueError(f"{name} must be non-empty")
        if self.max_upload_bytes <= 0:
            raise ValueError(f"max_upload_bytes must be positive, got {self.max_upload_bytes}")
        if self.transcript_char_limit <= 0:
            raise ValueError(
                f"transcript_char_limit must be positive, got {self.transcript_char_limit}"
            )

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> AssistantSettings:
        """Build settings from environment-style variables.

        Reads ``CHAT_MODEL``, ``ANALYSIS_MODEL``, ``TRANSCRIPTION_MODEL``,
        ``MAX_UPLOAD_MB`` and ``TRANSCRIPT_CHAR_LIMIT``; unset or blank
        variables keep the defaults.

        Raises:
            ValueError: If a numeric variable is not an integer or a value
                fails validation.
        """
        defaults = cls()
        max_upload_mb = env.get("MAX_UPLOAD_MB", "").strip()
        char_limit = env.get("TRANSCRIPT_CHAR_LIMIT", "").strip()
        return cls(
            chat_model=env.get("CHAT_MODEL", "").strip() or defaults.chat_model,
            analysis_model=env.get("ANALYSIS_MODEL", "").strip() or defaults.analysis_model,
            transcription_model=(
                env.get("TRANSCRIPTION_MODEL", "").strip() or defaults.transcription_model
            ),
            max_upload_bytes=(
                int(max_upload_mb) * MIB if max_upload_mb else defaults.max_upload_bytes
            ),
            transcript_char_limit=int(char_limit) if char_limit else defaults.transcript_char_limit,
        )


DEFAULT_SETTINGS = AssistantSettings()
"""Default settings: gpt-4.1-mini chat, gpt-4o-mini analysis, whisper-1, 200 MiB, 4000 chars."""
