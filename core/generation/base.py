"""
Completion provider protocol and provider reply model.

Defines the contract that hosted completion/transcription backends must
satisfy, plus the small set of reply shapes the gateways understand.
This module is pure — no I/O, no network calls, no side effects.
Concrete implementations (OpenAI) live in gateways/.

Reply shapes
------------
Hosted completion APIs have returned text in more than one layout over
time. Rather than probing attributes at every call site, a raw payload is
classified once by :func:`reply_from_payload` into one of three variants:

    OutputTextReply    — flat ``output_text`` string
    ContentItemsReply  — ``output[].content[]`` parts, each ``{type, text}``
                         or ``{type, text: {value}}``
    UnrecognizedReply  — anything else

:func:`extract_reply_text` handles every variant explicitly.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from core.mixing.types import AudioUpload

# Content part types that carry model text.
TEXT_PART_TYPES: frozenset[str] = frozenset({"output_text", "text"})


@dataclass(frozen=True)
class OutputTextReply:
    """Reply carrying a single flat text field."""

    text: str


@dataclass(frozen=True)
class ContentPart:
    """One content part inside an output item.

    Attributes:
        type: Part type as reported by the provider (e.g. ``"output_text"``).
        text: Part text, already unwrapped from ``{"value": ...}`` if nested.
    """

    type: str
    text: str


@dataclass(frozen=True)
class ContentItemsReply:
    """Reply carrying a list of output items, each a tuple of content parts."""

    items: tuple[tuple[ContentPart, ...], ...]


@dataclass(frozen=True)
class UnrecognizedReply:
    """Reply whose layout matched none of the known variants."""

    description: str = ""


ProviderReply = OutputTextReply | ContentItemsReply | UnrecognizedReply


def _part_text(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, Mapping) and isinstance(raw.get("value"), str):
        return raw["value"]
    return ""


def _parse_items(output: list[Any]) -> tuple[tuple[ContentPart, ...], ...]:
    items: list[tuple[ContentPart, ...]] = []
    for item in output:
        if not isinstance(item, Mapping):
            continue
        content = item.get("content")
        if not isinstance(content, list):
            continue
        parts = tuple(
            ContentPart(type=str(piece.get("type", "")), text=_part_text(piece.get("text")))
            for piece in content
            if isinstance(piece, Mapping)
        )
        items.append(parts)
    return tuple(items)


def reply_from_payload(payload: Mapping[str, Any]) -> ProviderReply:
    """Classify a raw provider payload into a :data:`ProviderReply` variant.

    Output items win over the flat field when both are present and the
    items contain at least one content part.

    Args:
        payload: JSON-like dict (e.g. an SDK response's ``model_dump()``).

    Returns:
        The matching reply variant; never raises.
    """
    output = payload.get("output")
    if isinstance(output, list):
        items = _parse_items(output)
        if any(items):
            return ContentItemsReply(items=items)

    output_text = payload.get("output_text")
    if isinstance(output_text, str):
        return OutputTextReply(text=output_text)

    return UnrecognizedReply(description=f"keys={sorted(payload)}")


def extract_reply_text(reply: ProviderReply) -> str:
    """Return the plain reply text, stripped. Unrecognized replies yield ``""``."""
    if isinstance(reply, OutputTextReply):
        return reply.text.strip()
    if isinstance(reply, ContentItemsReply):
        return "".join(
            part.text for parts in reply.items for part in parts if part.type in TEXT_PART_TYPES
        ).strip()
    if isinstance(reply, UnrecognizedReply):
        return ""
    raise TypeError(f"unsupported reply variant: {type(reply).__name__}")


@dataclass(frozen=True)
class Transcript:
    """Result of a best-effort transcription.

    A degraded transcript has empty text and carries the failure reason;
    callers continue with it rather than handling an exception.
    """

    text: str
    degraded: bool = False
    error: str | None = None

    @classmethod
    def failed(cls, error: str) -> Transcript:
        return cls(text="", degraded=True, error=error)


@runtime_checkable
class CompletionProvider(Protocol):
    """
    Protocol for hosted completion + transcription backends.

    Structural typing: any class with these methods can back the gateways.
    """

    def complete(self, prompt: str, *, model: str | None = None) -> ProviderReply:
        """
        Send a single-turn prompt and return the classified reply.

        Raises:
            RuntimeError: If the API call fails.
        """
        ...

    def transcribe(self, upload: AudioUpload, *, model: str | None = None) -> str:
        """
        Transcribe an audio upload to text.

        Raises:
            RuntimeError: If the API call fails.
        """
        ...
