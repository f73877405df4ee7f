"""
OpenAI completion + transcription provider.

Implements the ``CompletionProvider`` protocol from core using OpenAI's
Responses API and audio transcription endpoint. Lives in gateways/
because it performs network I/O (core/ must remain pure).

Usage::

    provider = OpenAICompletionProvider()  # reads OPENAI_API_KEY
    reply = provider.complete("How do I tame 3 kHz harshness?")
"""

from __future__ import annotations

import logging
import os
from typing import Any

import openai
from dotenv import load_dotenv

from core.config import DEFAULT_SETTINGS
from core.generation.base import ProviderReply, reply_from_payload
from core.mixing.types import AudioUpload

logger = logging.getLogger(__name__)


def _response_payload(response: Any) -> dict[str, Any]:
    """Convert an SDK response object into a plain dict for classification."""
    if isinstance(response, dict):
        return response
    payload: dict[str, Any] = {}
    if hasattr(response, "model_dump"):
        dumped = response.model_dump()
        if isinstance(dumped, dict):
            payload = dumped
    # ``output_text`` is a convenience property on SDK objects, absent from model_dump().
    output_text = getattr(response, "output_text", None)
    if isinstance(output_text, str):
        payload.setdefault("output_text", output_text)
    return payload


class OpenAICompletionProvider:
    """
    Completion provider backed by OpenAI.

    Reads ``OPENAI_API_KEY`` from the environment. Model names default to
    the values in ``DEFAULT_SETTINGS`` and may be overridden per call.

    Satisfies the ``CompletionProvider`` protocol.
    """

    def __init__(
        self,
        model: str = DEFAULT_SETTINGS.chat_model,
        transcription_model: str = DEFAULT_SETTINGS.transcription_model,
        *,
        api_key: str | None = None,
    ) -> None:
        load_dotenv()
        resolved_key = api_key or os.environ.get("OPENAI_API_KEY", "")
        if not resolved_key:
            raise ValueError("OPENAI_API_KEY must be set in the environment or passed explicitly")
        self._client = openai.OpenAI(api_key=resolved_key)
        self._model = model
        self._transcription_model = transcription_model

    def complete(self, prompt: str, *, model: str | None = None) -> ProviderReply:
        """Send *prompt* as a single-turn request via the Responses API.

        Args:
            prompt: Complete prompt string.
            model: Optional model override for this call.

        Returns:
            The classified provider reply.

        Raises:
            RuntimeError: If the API call fails.
        """
        try:
            response = self._client.responses.create(model=model or self._model, input=prompt)
        except Exception as exc:
            raise RuntimeError(f"OpenAI completion failed: {exc}") from exc
        return reply_from_payload(_response_payload(response))

    def transcribe(self, upload: AudioUpload, *, model: str | None = None) -> str:
        """Transcribe an uploaded mix.

        Args:
            upload: Named audio file held in memory.
            model: Optional transcription model override.

        Returns:
            Transcript text (may be empty).

        Raises:
            RuntimeError: If the API call fails.
        """
        file_tuple = (upload.filename, upload.data, upload.content_type or "application/octet-stream")
        try:
            transcription = self._client.audio.transcriptions.create(
                model=model or self._transcription_model,
                file=file_tuple,
            )
        except Exception as exc:
            raise RuntimeError(f"OpenAI transcription failed: {exc}") from exc
        text = getattr(transcription, "text", None)
        return text if isinstance(text, str) else ""
