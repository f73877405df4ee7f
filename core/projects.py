"""Project snapshot type and its wire/storage encodings.

A project is a persisted, named snapshot of a chat session. Every field
except ``id`` is optional: an upsert writes absent fields as null.

Pure module — no I/O. Used by the store adapter (db/projects.py), the
project routes and the HTTP client.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from core.mixing.types import Message, Tone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Project:
    """A saved chat session.

    Attributes:
        id: Opaque id generated client-side (UUID4 string in practice).
        name: Display name.
        messages: Conversation, oldest first.
        mode: Mode id (e.g. ``"vocals"``).
        preset_id: Preset id within the mode.
        tone: Tone dial, or None when not stored / unparseable.
        mix_file_name: Label of the attached mix; the audio itself is never stored.
        created_at: Set by the store on first insert.
    """

    id: str
    name: str | None = None
    messages: tuple[Message, ...] | None = None
    mode: str | None = None
    preset_id: str | None = None
    tone: Tone | None = None
    mix_file_name: str | None = None
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        if not str(self.id).strip():
            raise ValueError("id must be non-empty")


def serialize_tone(tone: Tone | None) -> str | None:
    """Encode a tone as JSON text for the ``tone`` column."""
    if tone is None:
        return None
    return json.dumps(tone.to_dict())


def parse_tone(value: Any) -> Tone | None:
    """Decode a stored tone; anything unparseable yields None.

    Accepts JSON text or an already-decoded mapping.
    """
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            logger.warning("Unparseable tone JSON in project row: %r", value[:80])
            return None
    if not isinstance(value, Mapping):
        return None
    try:
        return Tone.from_mapping(value)
    except ValueError as exc:
        logger.warning("Invalid tone values in project row: %s", exc)
        return None


def messages_to_list(messages: tuple[Message, ...] | None) -> list[dict[str, str]] | None:
    if messages is None:
        return None
    return [m.to_dict() for m in messages]


def messages_from_list(value: Any) -> tuple[Message, ...] | None:
    """Decode stored messages; rows with an unknown role are skipped."""
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            return None
    if not isinstance(value, list):
        return None
    messages = []
    for item in value:
        if not isinstance(item, Mapping):
            continue
        try:
            messages.append(Message.from_dict(item))
        except ValueError:
            logger.warning("Skipping stored message with role %r", item.get("role"))
    return tuple(messages)


def project_to_payload(project: Project) -> dict[str, Any]:
    """Encode a project for the JSON wire format (camelCase column names)."""
    return {
        "id": project.id,
        "name": project.name,
        "messages": messages_to_list(project.messages),
        "mode": project.mode,
        "presetId": project.preset_id,
        "tone": project.tone.to_dict() if project.tone else None,
        "mixFileName": project.mix_file_name,
        "created_at": project.created_at.isoformat() if project.created_at else None,
    }


def project_from_payload(payload: Mapping[str, Any]) -> Project:
    """Decode a project from the JSON wire format.

    Raises:
        ValueError: If ``id`` is missing or blank.
    """
    created_at = payload.get("created_at")
    return Project(
        id=str(payload.get("id") or ""),
        name=payload.get("name"),
        messages=messages_from_list(payload.get("messages")),
        mode=payload.get("mode"),
        preset_id=payload.get("presetId"),
        tone=parse_tone(payload.get("tone")),
        mix_file_name=payload.get("mixFileName"),
        created_at=datetime.fromisoformat(created_at) if created_at else None,
    )
