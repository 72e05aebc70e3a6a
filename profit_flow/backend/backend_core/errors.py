"""
Application-level errors.

Market-data errors (DataUnavailable, SourceUnavailable) live in
market_core.utils.error_handling; these cover tool dispatch and persistence.
"""

from typing import Any, Optional


class ProfitFlowError(Exception):
    """Base class for backend errors."""


class MalformedArguments(ProfitFlowError):
    """The model's tool-call arguments are not valid JSON (or not an object)."""

    def __init__(self, tool_name: str, raw: Any, reason: str):
        super().__init__(f"{tool_name}: malformed arguments ({reason})")
        self.tool_name = tool_name
        self.raw = raw
        self.reason = reason


class InvalidArguments(ProfitFlowError):
    """The arguments parsed but do not satisfy the tool's parameter schema."""

    def __init__(self, tool_name: str, reason: str):
        super().__init__(f"{tool_name}: invalid arguments ({reason})")
        self.tool_name = tool_name
        self.reason = reason


class NotConfigured(ProfitFlowError):
    """No company information document exists for the organization."""

    def __init__(self, organization: str):
        super().__init__(f"Company information not found for '{organization}'")
        self.organization = organization


class NotFound(ProfitFlowError):
    """Feedback referenced a messageId that was never logged."""

    def __init__(self, message_id: str):
        super().__init__(f"Message not found: {message_id}")
        self.message_id = message_id


class PersistenceFailure(ProfitFlowError):
    """A chat-log write failed."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause
