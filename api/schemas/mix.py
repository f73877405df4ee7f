"""
api/schemas/mix.py — Pydantic model for the ``/api/analyze-mix`` form fields.

The endpoint receives multipart form data, so the route collects the raw
text fields and validates them here in one place. ``question`` falls back
to ``prompt``; every context field falls back to its default when blank,
and a tone field holding an unknown level is treated as blank.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from api.schemas.chat import ToneIn
from core.mixing.types import DEFAULT_MODE_LABEL, DEFAULT_PRESET_LABEL, TONE_LEVELS, MixContext


def _known_level(field: str, value: str | None) -> str | None:
    value = (value or "").strip()
    return value if value in TONE_LEVELS[field] else None


class MixAnalysisForm(BaseModel):
    """Text fields of ``POST /api/analyze-mix``, defaults applied."""

    question: str = Field("", description="Question about the mix, trimmed")
    mode: str = DEFAULT_MODE_LABEL
    preset: str = DEFAULT_PRESET_LABEL
    tone: ToneIn = Field(default_factory=ToneIn)

    @classmethod
    def from_fields(
        cls,
        *,
        question: str | None = None,
        prompt: str | None = None,
        mode: str | None = None,
        preset: str | None = None,
        aggression: str | None = None,
        tightness: str | None = None,
        brightness: str | None = None,
    ) -> MixAnalysisForm:
        """Build the form model from raw multipart values."""
        return cls.model_validate(
            {
                "question": (question or prompt or "").strip(),
                "mode": (mode or "").strip() or DEFAULT_MODE_LABEL,
                "preset": (preset or "").strip() or DEFAULT_PRESET_LABEL,
                "tone": {
                    "aggression": _known_level("aggression", aggression),
                    "tightness": _known_level("tightness", tightness),
                    "brightness": _known_level("brightness", brightness),
                },
            }
        )

    def to_context(self) -> MixContext:
        return MixContext(mode=self.mode, preset=self.preset, tone=self.tone.to_tone())
