"""
Chat API endpoints.

POST /api/chat runs one chat turn through the orchestrator.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging

from profit_flow.backend.api.deps import get_orchestrator, get_settings
from profit_flow.backend.backend_core.config import Settings
from profit_flow.backend.backend_core.orchestrator import ChatOrchestrator
from profit_flow.backend.backend_core.schemas import ChatRequest, ChatResponse, ErrorResponse

router = APIRouter()
logger = logging.getLogger(__name__)

CHAT_UNAVAILABLE = "Financial data currently unavailable. Please try again later."


@router.post(
    "",
    response_model=ChatResponse,
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}},
)
async def chat(
    body: ChatRequest,
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_settings),
):
    """Send the conversation and get the assistant's reply."""
    messages = [m.model_dump() for m in body.messages]
    try:
        result = await orchestrator.process_message(messages)
    except Exception as e:
        logger.error(f"Chat turn failed: {e}", exc_info=True)
        content = {"error": CHAT_UNAVAILABLE}
        if not settings.is_production:
            content["details"] = str(e)
        return JSONResponse(status_code=500, content=content)

    if result.function_name:
        logger.info(f"Chat turn complete: function={result.function_name} message_id={result.message_id}")
    return ChatResponse(
        content=result.content,
        raw_data=result.raw_data,
        function_name=result.function_name,
        message_id=result.message_id,
        chart=result.chart,
    )
