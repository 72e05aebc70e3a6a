"""
LLM Orchestrator for Profit Flow.

One chat turn runs through a fixed sequence:

    AwaitingModelDecision -> DirectAnswer
    AwaitingModelDecision -> ToolSelected -> ToolExecuting -> AwaitingNarration -> Complete

The model either answers directly or selects one tool. A selected tool is run
(bad arguments or an unknown name yield a "Function not supported" result
instead), its result is handed back to the model for narration, and the
exchange is written to the chat log. Errors raised by the model or a tool
propagate to the caller; nothing is retried.
"""

from dataclasses import dataclass
from typing import List, Dict, Optional, Any
import logging
import uuid

from market_core.visualization.chart_series import project_chart
from profit_flow.backend.backend_core.chat_log import ChatLogEntry, ChatLogStore
from profit_flow.backend.backend_core.errors import InvalidArguments, MalformedArguments
from profit_flow.backend.backend_core.llm import DirectAnswer, ToolCall
from profit_flow.backend.backend_core.prompts import (
    FALLBACK_DIRECT_ANSWER,
    format_company_data,
    format_market_data,
    get_company_narration_prompt,
    get_market_narration_prompt,
    get_system_prompt,
)
from profit_flow.backend.backend_core.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

UNSUPPORTED_FUNCTION = "Function not supported"
COMPANY_TOOL = "get_company_info"


@dataclass
class ChatTurnResult:
    content: str
    raw_data: Optional[Any] = None
    function_name: Optional[str] = None
    message_id: Optional[str] = None
    chart: Optional[Dict[str, Any]] = None


def _last_user_message(messages: List[Dict[str, str]]) -> str:
    for msg in reversed(messages):
        if msg.get("role") == "user":
            return msg.get("content") or ""
    return ""


class ChatOrchestrator:
    """
    Orchestrates chat interactions with the LLM and tools.

    Responsibilities:
    - Ask the model for a decision with the tool catalog
    - Route the selected tool call through the registry
    - Narrate tool results
    - Record tool turns in the chat log
    """

    def __init__(
        self,
        llm,
        tool_registry: ToolRegistry,
        chat_log: ChatLogStore,
        company_name: str = "Profit Flow",
        max_conversation_messages: int = 20,
        log_direct_answers: bool = False,
    ):
        self.llm = llm
        self.tool_registry = tool_registry
        self.chat_log = chat_log
        self.company_name = company_name
        self.max_conversation_messages = max_conversation_messages
        self.log_direct_answers = log_direct_answers
        self.system_prompt = get_system_prompt()

    def _window(self, messages: List[Dict[str, str]]) -> List[Dict[str, str]]:
        if self.max_conversation_messages and len(messages) > self.max_conversation_messages:
            return messages[-self.max_conversation_messages:]
        return list(messages)

    async def process_message(self, messages: List[Dict[str, str]]) -> ChatTurnResult:
        """
        Run one chat turn.

        Args:
            messages: Conversation as [{role, content}], oldest first

        Returns:
            ChatTurnResult; raw_data, function_name and message_id are set
            only for tool turns
        """
        conversation = self._window(messages)
        user_query = _last_user_message(messages)

        decision = await self.llm.decide(
            [{"role": "system", "content": self.system_prompt}, *conversation],
            self.tool_registry.get_function_definitions(),
        )

        if isinstance(decision, DirectAnswer):
            return self._direct_answer(decision, user_query)

        if not isinstance(decision, ToolCall):
            raise TypeError(f"Unexpected model decision: {decision!r}")
        raw_data = await self._execute_tool(decision)
        content = await self._narrate(decision.name, raw_data, conversation)

        message_id = str(uuid.uuid4())
        self.chat_log.record(
            ChatLogEntry(
                message_id=message_id,
                user_query=user_query,
                assistant_response=content,
                function_name=decision.name,
            )
        )

        chart = None
        if decision.name != COMPANY_TOOL:
            series = project_chart(raw_data)
            chart = series.to_dict() if series else None

        return ChatTurnResult(
            content=content,
            raw_data=raw_data,
            function_name=decision.name,
            message_id=message_id,
            chart=chart,
        )

    def _direct_answer(self, decision: DirectAnswer, user_query: str) -> ChatTurnResult:
        content = decision.text or FALLBACK_DIRECT_ANSWER
        if not self.log_direct_answers:
            return ChatTurnResult(content=content)

        message_id = str(uuid.uuid4())
        self.chat_log.record(
            ChatLogEntry(message_id=message_id, user_query=user_query, assistant_response=content)
        )
        return ChatTurnResult(content=content, message_id=message_id)

    async def _execute_tool(self, call: ToolCall) -> Any:
        if self.tool_registry.get_tool(call.name) is None:
            logger.warning(f"Model selected unknown tool: {call.name}")
            return {"error": UNSUPPORTED_FUNCTION}

        try:
            return await self.tool_registry.execute_tool(call.name, call.arguments_json)
        except MalformedArguments as e:
            logger.warning(f"Malformed arguments for {call.name}: {e.reason} (raw={e.raw!r})")
            return {"error": UNSUPPORTED_FUNCTION, "reason": "Malformed arguments"}
        except InvalidArguments as e:
            logger.warning(f"Invalid arguments for {call.name}: {e.reason}")
            return {"error": UNSUPPORTED_FUNCTION, "reason": f"Invalid arguments: {e.reason}"}

    async def _narrate(self, function_name: str, raw_data: Any, conversation: List[Dict[str, str]]) -> str:
        if function_name == COMPANY_TOOL:
            system = get_company_narration_prompt(self.company_name)
            data_message = format_company_data(raw_data)
            temperature, max_tokens = 0.7, 500
        else:
            system = get_market_narration_prompt()
            data_message = format_market_data(raw_data)
            temperature, max_tokens = 0.6, 1000

        return await self.llm.narrate(
            [
                *conversation,
                {"role": "system", "content": system},
                {"role": "user", "content": data_message},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
