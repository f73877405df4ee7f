"""Core types for mixing advice — pure value objects.

All types are frozen dataclasses. No I/O, no imports from db/, api/,
gateways/ or client/.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

Role = Literal["user", "assistant"]
Aggression = Literal["low", "medium", "high"]
Tightness = Literal["loose", "medium", "ultra-tight"]
Brightness = Literal["dark", "neutral", "bright"]

AGGRESSION_LEVELS: tuple[str, ...] = ("low", "medium", "high")
TIGHTNESS_LEVELS: tuple[str, ...] = ("loose", "medium", "ultra-tight")
BRIGHTNESS_LEVELS: tuple[str, ...] = ("dark", "neutral", "bright")

TONE_LEVELS: dict[str, tuple[str, ...]] = {
    "aggression": AGGRESSION_LEVELS,
    "tightness": TIGHTNESS_LEVELS,
    "brightness": BRIGHTNESS_LEVELS,
}

DEFAULT_MODE_LABEL = "Vocals"
DEFAULT_PRESET_LABEL = "Modern Metalcore"


@dataclass(frozen=True)
class Message:
    """A single chat message.

    Attributes:
        role: ``"user"`` or ``"assistant"``.
        content: Message text. May be empty (the transcript keeps it as sent).
    """

    role: Role
    content: str

    def __post_init__(self) -> None:
        if self.role not in ("user", "assistant"):
            raise ValueError(f"role must be 'user' or 'assistant', got {self.role!r}")

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Message:
        return cls(role=data.get("role", ""), content=str(data.get("content") or ""))


@dataclass(frozen=True)
class Tone:
    """Three-axis style dial passed into every prompt.

    Attributes:
        aggression: low | medium | high.
        tightness: loose | medium | ultra-tight.
        brightness: dark | neutral | bright.
    """

    aggression: Aggression = "medium"
    tightness: Tightness = "medium"
    brightness: Brightness = "neutral"

    def __post_init__(self) -> None:
        for name, allowed in TONE_LEVELS.items():
            value = getattr(self, name)
            if value not in allowed:
                raise ValueError(f"{name} must be one of {list(allowed)}, got {value!r}")

    def to_dict(self) -> dict[str, str]:
        return {
            "aggression": self.aggression,
            "tightness": self.tightness,
            "brightness": self.brightness,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Tone:
        """Build a Tone from a partial mapping; missing or blank fields take defaults.

        Raises:
            ValueError: If a present field holds a value outside its level set.
        """
        defaults = cls()
        values = {}
        for name in TONE_LEVELS:
            raw = data.get(name)
            stripped = str(raw).strip() if raw is not None else ""
            values[name] = stripped or getattr(defaults, name)
        return cls(**values)


@dataclass(frozen=True)
class MixContext:
    """Mode, preset and tone for one gateway request, already defaulted.

    ``mode`` and ``preset`` are the human-readable labels that go into the
    prompt (e.g. ``"Vocals"``, ``"Modern Metalcore"``), not catalog ids.
    """

    mode: str = DEFAULT_MODE_LABEL
    preset: str = DEFAULT_PRESET_LABEL
    tone: Tone = field(default_factory=Tone)

    def __post_init__(self) -> None:
        if not self.mode.strip():
            raise ValueError("mode must be non-empty")
        if not self.preset.strip():
            raise ValueError("preset must be non-empty")


@dataclass(frozen=True)
class AudioUpload:
    """An uploaded audio file held in memory.

    Attributes:
        filename: Name sent to the transcription endpoint.
        data: Raw file bytes.
        content_type: MIME type reported by the client, if any.
    """

    filename: str
    data: bytes
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"AudioUpload(filename={self.filename!r}, size={self.size})"
