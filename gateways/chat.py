"""
Chat completion gateway.

Flattens a conversation plus mode/preset/tone into one prompt, forwards
it to the completion provider and returns plain reply text. Every
outcome is a ``GatewayReply`` — failures never escape as exceptions.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from core.config import DEFAULT_SETTINGS, AssistantSettings
from core.generation.base import CompletionProvider, extract_reply_text
from core.mixing.prompts import build_chat_prompt
from core.mixing.types import Message, MixContext

logger = logging.getLogger(__name__)

EMPTY_REPLY_FALLBACK = (
    "I couldn't generate a reply for some reason. Try rephrasing your question about the mix."
)
CHAT_ERROR_REPLY = "There was a server error talking to the AI backend. Try again in a moment."


@dataclass(frozen=True)
class GatewayReply:
    """Reply text plus the HTTP status the route should answer with."""

    reply: str
    status_code: int = 200


class ChatGateway:
    """Proxy between ``POST /api/chat`` and the completion provider.

    Args:
        provider: Backend satisfying ``CompletionProvider``.
        settings: Model names; defaults to ``DEFAULT_SETTINGS``.
    """

    def __init__(
        self,
        provider: CompletionProvider,
        settings: AssistantSettings = DEFAULT_SETTINGS,
    ) -> None:
        self._provider = provider
        self._settings = settings

    def reply(self, messages: Sequence[Message], context: MixContext) -> GatewayReply:
        """Answer the latest turn of *messages*.

        Returns:
            200 with the extracted text (or the empty-reply fallback), or 500
            with a fixed message when the provider fails. No retry.
        """
        prompt = build_chat_prompt(messages, context)
        try:
            reply = self._provider.complete(prompt, model=self._settings.chat_model)
            text = extract_reply_text(reply)
        except Exception:
            logger.exception("chat gateway error")
            return GatewayReply(reply=CHAT_ERROR_REPLY, status_code=500)

        if not text:
            logger.warning("Empty reply extracted from provider response: %r", reply)
            return GatewayReply(reply=EMPTY_REPLY_FALLBACK)
        return GatewayReply(reply=text)
