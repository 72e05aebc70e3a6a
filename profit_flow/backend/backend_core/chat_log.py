"""
Chat log store.

Writes one row per logged exchange and applies like / dislike / report
feedback. Recording is best-effort: a failed insert is logged and reported
back as False, never raised to the chat route.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from profit_flow.backend.backend_core.database import Database
from profit_flow.backend.backend_core.errors import NotFound, PersistenceFailure
from profit_flow.backend.backend_core.models import ChatLog
from profit_flow.backend.backend_core.schemas import ChatLogRecord

logger = logging.getLogger(__name__)

FEEDBACK_ACTIONS = ("like", "dislike", "report")


@dataclass
class ChatLogEntry:
    message_id: str
    user_query: str
    assistant_response: str
    function_name: Optional[str] = None
    timestamp: Optional[datetime] = None


def _feedback_values(action: str, report_message: Optional[str]) -> Dict[str, Any]:
    # like and dislike are mutually exclusive; report is independent
    if action == "like":
        return {"like": True, "dislike": False}
    if action == "dislike":
        return {"like": False, "dislike": True}
    if action == "report":
        return {"report": True, "report_message": report_message or ""}
    raise ValueError(f"Invalid action: {action!r}")


class ChatLogStore:
    def __init__(self, database: Database):
        self._database = database

    def record(self, entry: ChatLogEntry) -> bool:
        row = ChatLog(
            message_id=entry.message_id,
            timestamp=entry.timestamp or datetime.now(timezone.utc),
            user_query=entry.user_query,
            assistant_response=entry.assistant_response,
            function_name=entry.function_name,
            like=False,
            dislike=False,
            report=False,
            report_message="",
        )
        with self._database.session() as db:
            try:
                db.add(row)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                failure = PersistenceFailure("chat log write", e)
                logger.error(f"Error writing chat log {entry.message_id}: {failure}", exc_info=True)
                return False
        logger.info(f"Chat log written: {entry.message_id}")
        return True

    def apply_feedback(
        self,
        message_id: str,
        action: str,
        report_message: Optional[str] = None,
    ) -> ChatLogRecord:
        """
        Apply one feedback action as a single UPDATE on the message's row.

        Raises:
            ValueError: action is not like / dislike / report
            NotFound: no row for message_id (nothing is written)
            SQLAlchemyError: the update itself failed
        """
        values = _feedback_values(action, report_message)
        with self._database.session() as db:
            try:
                result = db.execute(
                    update(ChatLog).where(ChatLog.message_id == message_id).values(**values)
                )
                if result.rowcount == 0:
                    db.rollback()
                    raise NotFound(message_id)
                db.commit()
            except SQLAlchemyError:
                db.rollback()
                raise
            row = db.get(ChatLog, message_id)
            return ChatLogRecord.from_row(row)

    def get(self, message_id: str) -> Optional[ChatLogRecord]:
        with self._database.session() as db:
            row = db.get(ChatLog, message_id)
            return ChatLogRecord.from_row(row) if row is not None else None

    def count(self) -> int:
        with self._database.session() as db:
            return db.query(ChatLog).count()
