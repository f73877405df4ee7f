"""
Chat route — plain conversational mixing advice.

``POST /api/chat`` — flattens the conversation with mode/preset/tone into
one prompt and returns ``{"reply": ...}``. Provider failures answer 500
with a fixed message; the raw error is only logged.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.deps import get_chat_gateway
from api.schemas.chat import ChatRequest, ReplyResponse
from gateways.chat import ChatGateway
from infrastructure.metrics import LatencyTimer, record_gateway_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

Gateway = Annotated[ChatGateway, Depends(get_chat_gateway)]


@router.post(
    "/chat",
    response_model=ReplyResponse,
    responses={500: {"model": ReplyResponse}},
)
def chat(body: ChatRequest, gateway: Gateway) -> JSONResponse:
    """
    Answer the latest user turn of the conversation.

    Returns:
        200 ``{"reply": str}`` — never blank; a fixed fallback replaces
        empty model output.
        500 ``{"reply": str}`` — fixed message when the AI backend fails.
    """
    with LatencyTimer() as timer:
        result = gateway.reply(body.to_messages(), body.to_context())
    record_gateway_request(
        endpoint="chat", status=result.status_code, latency_seconds=timer.elapsed
    )
    logger.info(
        "chat: %d message(s), status=%d, %.0f ms",
        len(body.messages),
        result.status_code,
        timer.elapsed * 1000,
    )
    return JSONResponse(status_code=result.status_code, content={"reply": result.reply})
