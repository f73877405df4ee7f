"""
Analyze-mix route — critique of an uploaded mix.

``POST /api/analyze-mix`` (multipart/form-data)

Fields
======
    file        optional audio upload (WAV/MP3), capped at 200 MiB
    question    optional question (``prompt`` accepted as an alias)
    mode, preset, aggression, tightness, brightness
                optional text, blank or unknown values take defaults

Status codes
============
    200  — ``{"reply": str}`` critique or advice
    400  — no file and no question, or file over the cap (guidance reply)
    500  — fixed error reply; raw error only logged
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from api.deps import get_mix_analysis_gateway
from api.schemas.chat import ReplyResponse
from api.schemas.mix import MixAnalysisForm
from core.mixing.types import AudioUpload
from gateways.chat import GatewayReply
from gateways.mix_analysis import (
    ANALYSIS_ERROR_REPLY,
    FILE_TOO_LARGE_REPLY,
    MixAnalysisGateway,
)
from infrastructure.metrics import LatencyTimer, record_gateway_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analyze-mix"])

Gateway = Annotated[MixAnalysisGateway, Depends(get_mix_analysis_gateway)]


def _read_upload(file: UploadFile | None) -> AudioUpload | None:
    """Read the multipart file into memory. Empty unnamed parts count as no file."""
    if file is None:
        return None
    data = file.file.read()
    if not data and not file.filename:
        return None
    return AudioUpload(filename=file.filename or "", data=data, content_type=file.content_type)


def _analyze(
    gateway: MixAnalysisGateway,
    file: UploadFile | None,
    form: MixAnalysisForm,
) -> GatewayReply:
    # Reject before buffering when the multipart parser already knows the size.
    if file is not None and gateway.too_large(file.size):
        return GatewayReply(reply=FILE_TOO_LARGE_REPLY, status_code=400)
    try:
        upload = _read_upload(file)
    except Exception:
        logger.exception("analyze-mix error")
        return GatewayReply(reply=ANALYSIS_ERROR_REPLY, status_code=500)
    return gateway.analyze(upload, form.question, form.to_context())


@router.post(
    "/analyze-mix",
    response_model=ReplyResponse,
    responses={400: {"model": ReplyResponse}, 500: {"model": ReplyResponse}},
)
def analyze_mix(
    gateway: Gateway,
    file: Annotated[UploadFile | None, File()] = None,
    question: Annotated[str | None, Form()] = None,
    prompt: Annotated[str | None, Form()] = None,
    mode: Annotated[str | None, Form()] = None,
    preset: Annotated[str | None, Form()] = None,
    aggression: Annotated[str | None, Form()] = None,
    tightness: Annotated[str | None, Form()] = None,
    brightness: Annotated[str | None, Form()] = None,
) -> JSONResponse:
    """Critique the uploaded mix, or give text-only advice when no file is attached."""
    form = MixAnalysisForm.from_fields(
        question=question,
        prompt=prompt,
        mode=mode,
        preset=preset,
        aggression=aggression,
        tightness=tightness,
        brightness=brightness,
    )

    with LatencyTimer() as timer:
        result = _analyze(gateway, file, form)
    record_gateway_request(
        endpoint="analyze_mix", status=result.status_code, latency_seconds=timer.elapsed
    )
    logger.info(
        "analyze-mix: file=%s, status=%d, %.0f ms",
        file.filename if file is not None else None,
        result.status_code,
        timer.elapsed * 1000,
    )
    return JSONResponse(status_code=result.status_code, content={"reply": result.reply})
