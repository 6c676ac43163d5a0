import asyncio
import json

import httpx
import pytest

from messer_cli.backend.base import Credentials, Message, ThreadEvent
from messer_cli.backend.gateway import GatewayBackend, dispatch_frame, parse_event
from messer_cli.errors import BackendError, LoginFailedError
from messer_cli.threads import Thread

BASE_URL = "http://gateway.test/v1"

ME = {
    "id": "1",
    "name": "Me Myself",
    "friends": [{"user_id": "42", "full_name": "Bob Smith"}],
}


async def fixed_credentials() -> Credentials:
    return Credentials(email="me@example.com", password="hunter2")


async def fixed_code() -> str:
    return "123456"


def make_backend(handler) -> GatewayBackend:
    backend = GatewayBackend(
        base_url=BASE_URL,
        events_url="ws://gateway.test/v1/events",
        transport=httpx.MockTransport(handler),
    )
    backend.prompt_credentials = fixed_credentials
    backend.get_mfa_code = fixed_code
    return backend


@pytest.mark.asyncio
async def test_login_with_mfa_sets_user_and_token() -> None:
    seen: list[tuple[str, str, str | None]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, request.headers.get("Authorization")))
        if request.url.path == "/v1/login":
            assert json.loads(request.content) == {"email": "me@example.com", "password": "hunter2"}
            return httpx.Response(200, json={"mfa_required": True, "login_token": "pending"})
        if request.url.path == "/v1/login/mfa":
            assert json.loads(request.content) == {"code": "123456", "login_token": "pending"}
            return httpx.Response(200, json={"session_token": "tok"})
        if request.url.path == "/v1/me":
            return httpx.Response(200, json=ME)
        return httpx.Response(404)

    backend = make_backend(handler)
    user = await backend.login()
    await backend.close()

    assert user.name == "Me Myself"
    assert user.find_friend("42").full_name == "Bob Smith"
    assert backend.user == user
    assert seen[-1] == ("GET", "/v1/me", "Bearer tok")


@pytest.mark.asyncio
async def test_rejected_login_raises_login_failed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": {"message": "Wrong password"}})

    backend = make_backend(handler)
    with pytest.raises(LoginFailedError, match="Wrong password") as exc_info:
        await backend.login()
    await backend.close()

    assert exc_info.value.status_code == 401
    assert backend.user is None


@pytest.mark.asyncio
async def test_login_without_token_fails() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    backend = make_backend(handler)
    with pytest.raises(LoginFailedError):
        await backend.login()
    await backend.close()


@pytest.mark.asyncio
async def test_get_thread_list_sends_paging_params() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["limit"] == "20"
        assert request.url.params.get_list("folder") == ["INBOX"]
        assert "cursor" not in request.url.params
        return httpx.Response(
            200,
            json={"threads": [{"id": "100", "name": "Alice", "last_message_timestamp": "17", "extra": True}]},
        )

    backend = make_backend(handler)
    threads = await backend.get_thread_list(20, None, ["INBOX"])
    await backend.close()

    assert threads == [Thread(id="100", name="Alice", last_message_timestamp=17)]


@pytest.mark.asyncio
async def test_get_thread_list_without_threads_returns_none() -> None:
    backend = make_backend(lambda request: httpx.Response(200, json={}))
    assert await backend.get_thread_list(20, None, ["INBOX"]) is None
    await backend.close()


@pytest.mark.asyncio
async def test_get_thread_info_maps_http_errors() -> None:
    backend = make_backend(lambda request: httpx.Response(404, json={"error": "no such thread"}))

    with pytest.raises(BackendError, match="no such thread") as exc_info:
        await backend.get_thread_info("nope")
    await backend.close()

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_connection_errors_become_backend_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    backend = make_backend(handler)
    with pytest.raises(BackendError, match="Unable to reach messaging gateway"):
        await backend.get_thread_info("100")
    await backend.close()


@pytest.mark.asyncio
async def test_invalid_payload_becomes_backend_error() -> None:
    backend = make_backend(lambda request: httpx.Response(200, json={"name": "no id"}))

    with pytest.raises(BackendError, match="Invalid thread payload"):
        await backend.get_thread_info("100")
    await backend.close()


@pytest.mark.asyncio
async def test_send_message_and_history() -> None:
    posted: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            posted.append(json.loads(request.content))
            return httpx.Response(204)
        assert request.url.params["limit"] == "2"
        return httpx.Response(
            200, json={"messages": [{"thread_id": "42", "sender_id": "42", "body": "hey", "timestamp": 3}]}
        )

    backend = make_backend(handler)
    await backend.send_message("hello", "42")
    messages = await backend.get_thread_history("42", 2)
    await backend.close()

    assert posted == [{"body": "hello"}]
    assert messages == [Message(thread_id="42", sender_id="42", body="hey", timestamp=3)]


def test_parse_event_splits_messages_from_thread_events() -> None:
    message = parse_event(json.dumps({"type": "message", "thread_id": "42", "sender_id": "42", "body": "hi"}))
    event = parse_event(json.dumps({"type": "rename", "thread_id": "200", "thread": {"id": "200", "name": "Readers"}}))

    assert isinstance(message, Message)
    assert message.body == "hi"
    assert isinstance(event, ThreadEvent)
    assert event.thread == Thread(id="200", name="Readers")


def test_parse_event_drops_garbage() -> None:
    assert parse_event("not json") is None
    assert parse_event("[1, 2]") is None
    assert parse_event(json.dumps({"type": "message"})) is None


@pytest.mark.asyncio
async def test_failing_callback_drops_only_that_frame() -> None:
    delivered: list[str] = []

    async def on_message(message: Message) -> None:
        if message.body == "boom":
            raise RuntimeError("handler bug")
        delivered.append(message.body)

    async def on_thread_event(event: ThreadEvent) -> None:
        raise AssertionError("no thread events expected")

    for body in ("boom", "after"):
        frame = json.dumps({"type": "message", "thread_id": "42", "sender_id": "42", "body": body})
        await dispatch_frame(frame, on_message, on_thread_event)

    assert delivered == ["after"]


@pytest.mark.asyncio
async def test_close_tolerates_a_dead_listener() -> None:
    async def crashed() -> None:
        raise RuntimeError("listener died")

    backend = make_backend(lambda request: httpx.Response(204))
    backend._listener = asyncio.create_task(crashed())
    await asyncio.sleep(0)

    await backend.close()

    assert backend._listener is None
