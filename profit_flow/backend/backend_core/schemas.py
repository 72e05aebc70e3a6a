"""
Request/response models for the HTTP API.

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Message(BaseModel):
    """Chat message model."""
    role: Literal["user", "assistant", "system"]
    content: str


class ChatRequest(BaseModel):
    """Incoming chat conversation."""
    messages: List[Message] = Field(..., min_length=1)


class ChatResponse(CamelModel):
    """Assistant reply. Tool turns also carry rawData, functionName and messageId."""
    role: str = "assistant"
    content: str
    raw_data: Optional[Any] = None
    function_name: Optional[str] = None
    message_id: Optional[str] = None
    chart: Optional[Dict[str, Any]] = None


class FeedbackRequest(CamelModel):
    """Feedback on a logged exchange. action is validated by the route (400 on bad values)."""
    message_id: str
    action: str
    report_message: Optional[str] = None


class FeedbackResponse(CamelModel):
    message: str = "Feedback updated successfully"
    message_id: str


class FeedbackState(CamelModel):
    like: bool = False
    dislike: bool = False
    report: bool = False
    report_message: str = ""


class ChatLogRecord(CamelModel):
    """Read model for a chat_logs row."""
    message_id: str
    timestamp: Optional[datetime] = None
    user_query: str
    assistant_response: str
    function_name: Optional[str] = None
    feedback: FeedbackState

    @classmethod
    def from_row(cls, row) -> "ChatLogRecord":
        return cls(
            message_id=row.message_id,
            timestamp=row.timestamp,
            user_query=row.user_query or "",
            assistant_response=row.assistant_response or "",
            function_name=row.function_name,
            feedback=FeedbackState(
                like=bool(row.like),
                dislike=bool(row.dislike),
                report=bool(row.report),
                report_message=row.report_message or "",
            ),
        )


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
