"""
End-to-end tests for the HTTP API.

Tests the complete flow from API calls to chat-log persistence, with the
LLM scripted and market data served by the in-memory gateway.
"""

from profit_flow.backend.backend_core.config import Settings
from profit_flow.backend.backend_core.llm import DirectAnswer

from conftest import ScriptedLLM, tool_call

CONVERSATION = {"messages": [{"role": "user", "content": "Price of TCS?"}]}


def test_health_check(make_client):
    client = make_client(ScriptedLLM())

    response = client.get("/api/health/")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_readiness_checks_database_and_key(make_client):
    client = make_client(ScriptedLLM())

    data = client.get("/api/health/ready").json()

    assert data["checks"] == {"database": "ok", "openai": "ok"}
    assert data["status"] == "ready"


def test_config_is_non_sensitive(make_client):
    client = make_client(ScriptedLLM())

    data = client.get("/api/health/config").json()

    assert data["llm_model"] == "gpt-4o"
    assert data["company_name"] == "Profit Flow"
    assert "OPENAI_API_KEY" not in str(data)
    assert "test-key" not in str(data)


def test_direct_answer_response(make_client, chat_log):
    client = make_client(ScriptedLLM(DirectAnswer("Ask me about NSE stocks.")))

    response = client.post("/api/chat", json=CONVERSATION)

    assert response.status_code == 200
    assert response.json() == {"role": "assistant", "content": "Ask me about NSE stocks."}
    assert chat_log.count() == 0


def test_tool_turn_response(make_client, chat_log):
    llm = ScriptedLLM(tool_call("get_stock_price", '{"symbols": ["TCS"]}'), narration="**TCS** is at 3500.")
    client = make_client(llm)

    response = client.post("/api/chat", json=CONVERSATION)

    assert response.status_code == 200
    data = response.json()
    assert data["role"] == "assistant"
    assert data["content"] == "**TCS** is at 3500."
    assert data["functionName"] == "get_stock_price"
    assert data["rawData"][0]["canonicalSymbol"] == "TCS.NS"
    assert data["chart"]["type"] == "line"
    assert chat_log.get(data["messageId"]).assistant_response == "**TCS** is at 3500."


def test_chat_failure_returns_generic_error_with_details(make_client):
    client = make_client(ScriptedLLM(error=RuntimeError("upstream exploded")))

    response = client.post("/api/chat", json=CONVERSATION)

    assert response.status_code == 500
    assert response.json() == {
        "error": "Financial data currently unavailable. Please try again later.",
        "details": "upstream exploded",
    }


def test_chat_failure_hides_details_in_production(make_client):
    settings = Settings(
        _env_file=None,
        ENVIRONMENT="production",
        DATABASE_URL="sqlite:///:memory:",
        OPENAI_API_KEY="test-key",
        COMPANY_INFO_PATH=None,
    )
    client = make_client(ScriptedLLM(error=RuntimeError("upstream exploded")), settings=settings)

    response = client.post("/api/chat", json=CONVERSATION)

    assert response.status_code == 500
    assert response.json() == {"error": "Financial data currently unavailable. Please try again later."}


def test_empty_conversation_is_rejected(make_client):
    client = make_client(ScriptedLLM())

    response = client.post("/api/chat", json={"messages": []})

    assert response.status_code == 422


def _logged_message_id(client):
    response = client.post("/api/chat", json=CONVERSATION)
    return response.json()["messageId"]


def test_feedback_like_then_dislike(make_client, chat_log):
    client = make_client(ScriptedLLM(tool_call("get_stock_price", '{"symbols": ["TCS"]}')))
    message_id = _logged_message_id(client)

    response = client.put("/api/feedback", json={"messageId": message_id, "action": "like"})
    assert response.status_code == 200
    assert response.json() == {"message": "Feedback updated successfully", "messageId": message_id}

    client.put("/api/feedback", json={"messageId": message_id, "action": "dislike"})

    feedback = chat_log.get(message_id).feedback
    assert feedback.like is False
    assert feedback.dislike is True


def test_feedback_report_stores_message(make_client, chat_log):
    client = make_client(ScriptedLLM(tool_call("get_stock_price", '{"symbols": ["TCS"]}')))
    message_id = _logged_message_id(client)

    response = client.put(
        "/api/feedback",
        json={"messageId": message_id, "action": "report", "reportMessage": "Wrong price"},
    )

    assert response.status_code == 200
    feedback = chat_log.get(message_id).feedback
    assert feedback.report is True
    assert feedback.report_message == "Wrong price"


def test_feedback_invalid_action(make_client):
    client = make_client(ScriptedLLM())

    response = client.put("/api/feedback", json={"messageId": "m-1", "action": "love"})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid action"}


def test_feedback_unknown_message(make_client, chat_log):
    client = make_client(ScriptedLLM())

    response = client.put("/api/feedback", json={"messageId": "missing", "action": "like"})

    assert response.status_code == 404
    assert response.json() == {"error": "Message not found", "messageId": "missing"}
    assert chat_log.count() == 0


def test_feedback_store_failure(make_client, database):
    client = make_client(ScriptedLLM())
    with database.engine.begin() as conn:
        conn.exec_driver_sql("DROP TABLE chat_logs")

    response = client.put("/api/feedback", json={"messageId": "m-1", "action": "like"})

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to update feedback"
    assert "details" in response.json()
