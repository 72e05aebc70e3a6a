"""
Database models for Profit Flow.

Defines SQLAlchemy models for chat logs (one row per logged exchange) and the
company information document.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, JSON, Boolean
from sqlalchemy.sql import func

from profit_flow.backend.backend_core.database import Base


class ChatLog(Base):
    """
    One dispatched chat exchange.

    Created once per logged turn; afterwards only the feedback columns change.
    """
    __tablename__ = "chat_logs"
    __table_args__ = {'extend_existing': True}

    message_id = Column(String(36), primary_key=True, index=True)  # UUID string
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    user_query = Column(Text, nullable=False, default="")
    assistant_response = Column(Text, nullable=False, default="")
    function_name = Column(String, nullable=True)  # None for direct answers

    # Feedback
    like = Column(Boolean, nullable=False, default=False)
    dislike = Column(Boolean, nullable=False, default=False)
    report = Column(Boolean, nullable=False, default=False)
    report_message = Column(Text, nullable=False, default="")


class CompanyInfo(Base):
    """Static company information, one row per organization."""
    __tablename__ = "company_info"
    __table_args__ = {'extend_existing': True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)
    document = Column(JSON, nullable=False)  # {features, pricing, benefits, support, faq, ...}
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
