"""
Tests for decoding chat completions into ModelDecision.
"""

from types import SimpleNamespace

import pytest

from profit_flow.backend.backend_core.llm import DirectAnswer, OpenAIChatModel, ToolCall, decode_decision


def _tool_call(name, arguments):
    return SimpleNamespace(id=f"call_{name}", type="function", function=SimpleNamespace(name=name, arguments=arguments))


def test_text_reply_is_direct_answer():
    message = SimpleNamespace(content="Hello", tool_calls=None, function_call=None)
    assert decode_decision(message) == DirectAnswer("Hello")


def test_missing_content_is_empty_direct_answer():
    message = SimpleNamespace(content=None, tool_calls=[], function_call=None)
    assert decode_decision(message) == DirectAnswer("")


def test_tool_call_is_decoded():
    message = SimpleNamespace(content=None, tool_calls=[_tool_call("get_stock_price", '{"symbols": ["TCS"]}')])
    assert decode_decision(message) == ToolCall("get_stock_price", '{"symbols": ["TCS"]}')


def test_first_of_several_tool_calls_is_used():
    message = SimpleNamespace(
        content=None,
        tool_calls=[_tool_call("get_top_stocks", "{}"), _tool_call("get_top_cryptos", "{}")],
    )
    assert decode_decision(message).name == "get_top_stocks"


def test_legacy_function_call_is_decoded():
    message = SimpleNamespace(
        content=None, tool_calls=None, function_call=SimpleNamespace(name="get_company_info", arguments="")
    )
    assert decode_decision(message) == ToolCall("get_company_info", "{}")


class _FakeCompletions:
    def __init__(self, message):
        self.message = message
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        return SimpleNamespace(choices=[SimpleNamespace(message=self.message)])


def _client(message):
    completions = _FakeCompletions(message)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


@pytest.mark.asyncio
async def test_decide_offers_tools_with_auto_choice():
    client, completions = _client(SimpleNamespace(content="Hi", tool_calls=None, function_call=None))
    model = OpenAIChatModel(api_key="k", model="gpt-4o", client=client)
    functions = [{"name": "get_stock_price", "description": "d", "parameters": {"type": "object"}}]

    decision = await model.decide([{"role": "user", "content": "hi"}], functions)

    assert decision == DirectAnswer("Hi")
    assert completions.kwargs["model"] == "gpt-4o"
    assert completions.kwargs["tool_choice"] == "auto"
    assert completions.kwargs["parallel_tool_calls"] is False
    assert completions.kwargs["tools"] == [{"type": "function", "function": functions[0]}]


@pytest.mark.asyncio
async def test_narrate_passes_sampling_parameters():
    client, completions = _client(SimpleNamespace(content="Narration"))
    model = OpenAIChatModel(api_key="k", client=client)

    text = await model.narrate([{"role": "user", "content": "data"}], temperature=0.6, max_tokens=1000)

    assert text == "Narration"
    assert completions.kwargs["temperature"] == 0.6
    assert completions.kwargs["max_tokens"] == 1000
    assert "tools" not in completions.kwargs
