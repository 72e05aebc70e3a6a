"""
Feedback API endpoints.

PUT /api/feedback records like / dislike / report on a logged exchange.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
import logging

from profit_flow.backend.api.deps import get_chat_log, get_settings
from profit_flow.backend.backend_core.chat_log import FEEDBACK_ACTIONS, ChatLogStore
from profit_flow.backend.backend_core.config import Settings
from profit_flow.backend.backend_core.errors import NotFound
from profit_flow.backend.backend_core.schemas import FeedbackRequest, FeedbackResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.put("", response_model=FeedbackResponse)
async def update_feedback(
    body: FeedbackRequest,
    chat_log: ChatLogStore = Depends(get_chat_log),
    settings: Settings = Depends(get_settings),
):
    """Apply a feedback action to the exchange identified by messageId."""
    if body.action not in FEEDBACK_ACTIONS:
        return JSONResponse(status_code=400, content={"error": "Invalid action"})

    try:
        chat_log.apply_feedback(body.message_id, body.action, body.report_message)
    except NotFound:
        logger.info(f"Feedback for unknown message: {body.message_id}")
        return JSONResponse(
            status_code=404,
            content={"error": "Message not found", "messageId": body.message_id},
        )
    except SQLAlchemyError as e:
        logger.error(f"Error updating feedback for {body.message_id}: {e}", exc_info=True)
        content = {"error": "Failed to update feedback"}
        if not settings.is_production:
            content["details"] = str(e)
        return JSONResponse(status_code=500, content=content)

    logger.info(f"Feedback '{body.action}' recorded for {body.message_id}")
    return FeedbackResponse(message_id=body.message_id)
