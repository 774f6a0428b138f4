import json

import httpx
import pytest

from intentbot.core.errors import NLUQueryError, NLUTimeoutError
from intentbot.nlu import DialogflowClient, StaticNLU, is_valid_client_token, parse_query_response

TOKEN = "0123456789abcdef0123456789abcdef"


def _payload(action: str = "smalltalk.greetings.hello", code: int = 200, **status: str) -> dict:
    return {
        "id": "2f4c1e0b",
        "result": {
            "source": "agent",
            "resolvedQuery": "hello there",
            "action": action,
            "parameters": {"city": "Oslo"},
            "fulfillment": {"speech": "Hi! How are you doing?"},
            "score": 0.92,
        },
        "status": {"code": code, "errorType": status.get("errorType", "success"), **status},
        "sessionId": "1234",
    }


def _client(handler) -> DialogflowClient:
    return DialogflowClient(TOKEN, transport=httpx.MockTransport(handler), timeout_seconds=2.0)


def test_client_token_validation() -> None:
    assert is_valid_client_token(TOKEN) is True
    assert is_valid_client_token(" " + TOKEN + " ") is True
    assert is_valid_client_token("invalid") is False
    assert is_valid_client_token("") is False
    assert is_valid_client_token(None) is False


async def test_query_sends_dialogflow_request_and_parses_result() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_payload())

    result = await _client(handler).query("hello there", session_id="1234")

    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/v1/query"
    assert request.url.params["v"] == "20150910"
    assert request.headers["Authorization"] == f"Bearer {TOKEN}"
    assert json.loads(request.content) == {"query": ["hello there"], "lang": "en", "sessionId": "1234"}

    assert result.ok is True
    assert result.action == "smalltalk.greetings.hello"
    assert result.fulfillment == "Hi! How are you doing?"
    assert result.parameters == {"city": "Oslo"}
    assert result.resolved_query == "hello there"
    assert result.score == pytest.approx(0.92)


async def test_embedded_error_status_is_returned_not_raised() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        body = _payload(action="", code=401, errorType="unauthorized", errorDetails="Authentication failed")
        return httpx.Response(401, json=body)

    result = await _client(handler).query("hello", session_id="s")

    assert result.ok is False
    assert result.status_code == 401
    assert result.status.error_type == "unauthorized"
    assert result.error_text() == "Authentication failed"


async def test_connection_error_raises_query_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NLUQueryError) as exc_info:
        await _client(handler).query("hello", session_id="s")
    assert not isinstance(exc_info.value, NLUTimeoutError)


async def test_timeout_raises_timeout_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    with pytest.raises(NLUTimeoutError):
        await _client(handler).query("hello", session_id="s")


async def test_non_json_body_raises_query_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad gateway</html>")

    with pytest.raises(NLUQueryError):
        await _client(handler).query("hello", session_id="s")


async def test_payload_without_status_raises_query_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"result": {"action": "x"}})

    with pytest.raises(NLUQueryError):
        await _client(handler).query("hello", session_id="s")


def test_parse_tolerates_missing_result_block() -> None:
    result = parse_query_response({"status": {"code": 200}})

    assert result.ok is True
    assert result.action == ""
    assert result.fulfillment == ""
    assert result.parameters == {}
    assert result.score is None


def test_parse_rejects_non_numeric_status() -> None:
    with pytest.raises(NLUQueryError):
        parse_query_response({"status": {"code": "teapot"}})


async def test_static_nlu_resolves_longest_phrase_first() -> None:
    nlu = StaticNLU(
        {
            "hi": ("smalltalk.greetings.hello", "Hey!"),
            "hi there friend": ("smalltalk.greetings.friend", "Hello friend!"),
        }
    )

    friend = await nlu.query("Hi there friend, how are you", session_id="s")
    plain = await nlu.query("hi", session_id="s")
    unknown = await nlu.query("what time is it", session_id="s")

    assert friend.action == "smalltalk.greetings.friend"
    assert friend.fulfillment == "Hello friend!"
    assert plain.action == "smalltalk.greetings.hello"
    assert unknown.action == "input.unknown"
    assert unknown.ok is True
