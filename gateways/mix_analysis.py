"""
Mix analysis gateway.

``POST /api/analyze-mix`` pipeline:

    No attachment:
        no question  → 400 guidance, no API call
        question     → coaching prompt → completion → reply

    Attachment:
        1. Size guard (> cap → 400 guidance, no API call)
        2. Normalize to a named file (default ``mix.wav``)
        3. Best-effort transcription — failure degrades to an empty transcript
        4. Truncate transcript / substitute placeholder
        5. Structured critique prompt → completion → reply

Any failure outside the transcription step maps to one fixed error reply
with status 500. Transcription failures are absorbed one level deeper and
never reach that path.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from core.config import DEFAULT_SETTINGS, AssistantSettings
from core.generation.base import CompletionProvider, Transcript, extract_reply_text
from core.mixing.prompts import build_analysis_prompt, build_coaching_prompt, prepare_transcript
from core.mixing.types import AudioUpload, MixContext
from gateways.chat import GatewayReply
from infrastructure.metrics import record_transcription

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_NAME = "mix.wav"

NOTHING_TO_ANALYZE_REPLY = (
    "I didn't get a mix or a question. Try something like: "
    '"How do I tighten my drum bus for modern metalcore?"'
)
FILE_TOO_LARGE_REPLY = (
    "That file is pretty large. For now, upload a shorter section "
    "(around 60–90 seconds as WAV/MP3) and I'll critique that."
)
ANALYSIS_ERROR_REPLY = (
    "There was an error analyzing your mix. Make sure the file is a WAV/MP3 and try again."
)
EMPTY_ANALYSIS_FALLBACK = (
    "I couldn't put together a critique this time. "
    "Try asking again or attach a shorter section of the mix."
)


def normalize_upload(upload: AudioUpload) -> AudioUpload:
    """Ensure the upload carries a filename the transcription endpoint accepts."""
    if upload.filename and upload.filename.strip():
        return upload
    return replace(upload, filename=DEFAULT_UPLOAD_NAME)


class MixAnalysisGateway:
    """Proxy between ``POST /api/analyze-mix`` and the completion provider.

    Args:
        provider: Backend satisfying ``CompletionProvider``.
        settings: Models, upload cap and transcript limit.
    """

    def __init__(
        self,
        provider: CompletionProvider,
        settings: AssistantSettings = DEFAULT_SETTINGS,
    ) -> None:
        self._provider = provider
        self._settings = settings

    def too_large(self, size: int | None) -> bool:
        """True when *size* bytes exceeds the upload cap. Unknown size is not too large."""
        return size is not None and size > self._settings.max_upload_bytes

    def analyze(
        self,
        upload: AudioUpload | None,
        question: str,
        context: MixContext,
    ) -> GatewayReply:
        """Critique an uploaded mix, or coach from the question alone.

        Args:
            upload: The attached audio, or None.
            question: Free-text question, already trimmed. May be empty.
            context: Mode, preset and tone with defaults applied.

        Returns:
            A ``GatewayReply`` with status 200, 400 (guidance) or 500.
        """
        if upload is None:
            if not question:
                return GatewayReply(reply=NOTHING_TO_ANALYZE_REPLY, status_code=400)
            return self._complete(build_coaching_prompt(question, context))

        if self.too_large(upload.size):
            logger.info("Rejecting oversized upload %r (%d bytes)", upload.filename, upload.size)
            return GatewayReply(reply=FILE_TOO_LARGE_REPLY, status_code=400)

        try:
            named = normalize_upload(upload)
            transcript = self.transcribe(named)
            prompt = build_analysis_prompt(
                question,
                prepare_transcript(transcript.text, self._settings.transcript_char_limit),
                context,
            )
        except Exception:
            logger.exception("analyze-mix error")
            return GatewayReply(reply=ANALYSIS_ERROR_REPLY, status_code=500)
        return self._complete(prompt)

    def transcribe(self, upload: AudioUpload) -> Transcript:
        """Best-effort transcription; failures return a degraded ``Transcript``."""
        try:
            text = self._provider.transcribe(upload, model=self._settings.transcription_model)
        except Exception as exc:
            logger.error("Transcription error (continuing anyway): %s", exc)
            record_transcription("degraded")
            return Transcript.failed(str(exc))
        record_transcription("ok")
        return Transcript(text=text or "")

    def _complete(self, prompt: str) -> GatewayReply:
        try:
            reply = self._provider.complete(prompt, model=self._settings.analysis_model)
            text = extract_reply_text(reply)
        except Exception:
            logger.exception("analyze-mix error")
            return GatewayReply(reply=ANALYSIS_ERROR_REPLY, status_code=500)
        if not text:
            logger.warning("Empty analysis extracted from provider response: %r", reply)
            return GatewayReply(reply=EMPTY_ANALYSIS_FALLBACK)
        return GatewayReply(reply=text)
