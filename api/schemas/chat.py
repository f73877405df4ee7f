"""
Pydantic schemas for the ``/api/chat`` endpoint.

Blank or missing context fields take their defaults here, at the HTTP
boundary, so the gateway always receives a fully populated ``MixContext``.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from core.mixing.types import (
    DEFAULT_MODE_LABEL,
    DEFAULT_PRESET_LABEL,
    Message,
    MixContext,
    Tone,
)


def _blank_to_none(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value.strip() if isinstance(value, str) else value


class ToneIn(BaseModel):
    """Tone dial; each missing or blank field takes its default."""

    aggression: Literal["low", "medium", "high"] = "medium"
    tightness: Literal["loose", "medium", "ultra-tight"] = "medium"
    brightness: Literal["dark", "neutral", "bright"] = "neutral"

    @field_validator("aggression", "tightness", "brightness", mode="before")
    @classmethod
    def blank_means_default(cls, v: Any, info: Any) -> Any:
        """Replace blank values with the field default."""
        v = _blank_to_none(v)
        if v is None:
            return cls.model_fields[info.field_name].default
        return v

    def to_tone(self) -> Tone:
        return Tone(aggression=self.aggression, tightness=self.tightness, brightness=self.brightness)


class ChatMessageIn(BaseModel):
    """A single message of the conversation sent by the client."""

    role: Literal["user", "assistant"]
    content: str = ""

    def to_message(self) -> Message:
        return Message(role=self.role, content=self.content)


class ChatRequest(BaseModel):
    """Request body for ``POST /api/chat``."""

    messages: list[ChatMessageIn] = Field(
        default_factory=list,
        description="Conversation so far, oldest first. May be empty.",
    )
    mode: str = DEFAULT_MODE_LABEL
    preset: str = DEFAULT_PRESET_LABEL
    tone: ToneIn = Field(default_factory=ToneIn)

    @field_validator("mode", "preset", mode="before")
    @classmethod
    def blank_context_means_default(cls, v: Any, info: Any) -> Any:
        """Replace blank mode/preset values with their defaults."""
        v = _blank_to_none(v)
        if v is None:
            return cls.model_fields[info.field_name].default
        return v

    @field_validator("tone", mode="before")
    @classmethod
    def null_tone_means_default(cls, v: Any) -> Any:
        return {} if v is None else v

    def to_context(self) -> MixContext:
        return MixContext(mode=self.mode, preset=self.preset, tone=self.tone.to_tone())

    def to_messages(self) -> list[Message]:
        return [m.to_message() for m in self.messages]


class ReplyResponse(BaseModel):
    """Response body shared by both gateway endpoints."""

    reply: str = Field(..., description="Assistant reply or a fixed guidance/error message.")
