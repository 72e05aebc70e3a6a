"""
LLM boundary.

The chat completion is decoded here into a ModelDecision: either a
DirectAnswer with text, or a ToolCall naming one function and its raw JSON
arguments. Nothing past this module looks at the completion's fields.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union
import logging

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectAnswer:
    text: str


@dataclass(frozen=True)
class ToolCall:
    name: str
    arguments_json: str


ModelDecision = Union[DirectAnswer, ToolCall]


def decode_decision(message: Any) -> ModelDecision:
    """
    Decode a chat-completion message into a ModelDecision.

    Handles both the ``tool_calls`` list and the legacy ``function_call``
    field. When the model returns several tool calls only the first is used.
    """
    tool_calls = getattr(message, "tool_calls", None) or []
    if tool_calls:
        if len(tool_calls) > 1:
            logger.warning(
                f"Model returned {len(tool_calls)} tool calls; using the first "
                f"({[tc.function.name for tc in tool_calls]})"
            )
        function = tool_calls[0].function
        return ToolCall(name=function.name, arguments_json=function.arguments or "{}")

    function_call = getattr(message, "function_call", None)
    if function_call is not None:
        return ToolCall(name=function_call.name, arguments_json=function_call.arguments or "{}")

    return DirectAnswer(text=getattr(message, "content", None) or "")


class OpenAIChatModel:
    """
    Thin wrapper over ``AsyncOpenAI`` chat completions.

    ``decide`` offers the tool catalog and returns a ModelDecision;
    ``narrate`` is a plain completion used to turn tool results into prose.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        timeout: float = 60.0,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model
        if client is None and not api_key:
            # The SDK refuses to build a client without a key; requests will fail with 401 instead
            logger.warning("OPENAI_API_KEY is not set; chat requests will fail until it is configured")
        self.client = client or AsyncOpenAI(api_key=api_key or "not-configured", timeout=timeout)

    async def decide(
        self,
        messages: List[Dict[str, str]],
        functions: List[Dict[str, Any]],
    ) -> ModelDecision:
        llm_params: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
        }
        if functions:
            llm_params["tools"] = [{"type": "function", "function": f} for f in functions]
            llm_params["tool_choice"] = "auto"
            llm_params["parallel_tool_calls"] = False

        response = await self.client.chat.completions.create(**llm_params)
        decision = decode_decision(response.choices[0].message)
        logger.debug(f"Model decision: {decision}")
        return decision

    async def narrate(
        self,
        messages: List[Dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return response.choices[0].message.content or ""

    async def aclose(self) -> None:
        await self.client.close()
