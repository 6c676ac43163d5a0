"""HTTP + WebSocket client for the messaging gateway."""

import asyncio
import contextlib
import json
import logging
from typing import Any

import httpx
import websockets
from websockets.exceptions import WebSocketException
from pydantic import BaseModel, ValidationError

from messer_cli.backend.base import (
    Message,
    MessageCallback,
    ThreadEvent,
    ThreadEventCallback,
    User,
)
from messer_cli.errors import BackendError, LoginFailedError
from messer_cli.settings import settings
from messer_cli.terminal import prompt_code, prompt_credentials
from messer_cli.threads import Thread

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
    return f"Gateway returned HTTP {response.status_code}"


def _validate(model: type[BaseModel], data: Any) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise BackendError(f"Invalid {model.__name__.lower()} payload from gateway") from e


def parse_event(raw: str | bytes) -> Message | ThreadEvent | None:
    """Decode one push frame; returns None for frames that cannot be understood."""
    try:
        payload = json.loads(raw)
    except ValueError:
        logger.warning("Dropping non-JSON event frame")
        return None
    if not isinstance(payload, dict):
        logger.warning("Dropping event frame that is not an object")
        return None

    try:
        if payload.get("type") == "message":
            return Message.model_validate(payload)
        return ThreadEvent.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Dropping malformed event frame: {e}")
        return None


async def dispatch_frame(
    raw: str | bytes,
    on_message: MessageCallback,
    on_thread_event: ThreadEventCallback,
) -> None:
    """Deliver one push frame; a failing callback drops the frame, not the stream."""
    event = parse_event(raw)
    try:
        if isinstance(event, Message):
            await on_message(event)
        elif isinstance(event, ThreadEvent):
            await on_thread_event(event)
    except Exception:
        logger.exception(f"Event handler failed for {type(event).__name__}")


class GatewayBackend:
    """Backend that talks JSON over HTTP and receives push events over a WebSocket."""

    def __init__(
        self,
        base_url: str | None = None,
        events_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.base_url
        self.events_url = events_url or settings.events_url
        self.user: User | None = None
        self.prompt_credentials = prompt_credentials
        self.get_mfa_code = prompt_code

        self._token: str | None = None
        self._listener: asyncio.Task[None] | None = None
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or settings.request_timeout,
            transport=transport,
        )

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"} if self._token else {}

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.RequestError as e:
            raise BackendError(f"Unable to reach messaging gateway: {e}") from e

        if response.status_code >= 400:
            raise BackendError(_error_message(response), status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise BackendError("Gateway returned invalid JSON") from e

    async def login(self) -> User:
        credentials = await self.prompt_credentials()
        try:
            data = await self._request("POST", "login", json=credentials.model_dump())
            if isinstance(data, dict) and data.get("mfa_required"):
                code = await self.get_mfa_code()
                data = await self._request(
                    "POST",
                    "login/mfa",
                    json={"code": code, "login_token": data.get("login_token")},
                )
        except BackendError as e:
            raise LoginFailedError(f"Login failed: {e}", status_code=e.status_code) from e

        token = data.get("session_token") if isinstance(data, dict) else None
        if not token:
            raise LoginFailedError("Login failed: no session token returned")
        self._token = str(token)

        self.user = _validate(User, await self._request("GET", "me"))
        logger.info(f"Authenticated as {self.user.id}")
        return self.user

    async def logout(self) -> None:
        await self._request("POST", "logout")
        self._token = None

    async def listen(self, on_message: MessageCallback, on_thread_event: ThreadEventCallback) -> None:
        if self._listener is not None and not self._listener.done():
            return
        self._listener = asyncio.create_task(self._listen_loop(on_message, on_thread_event))

    async def _listen_loop(self, on_message: MessageCallback, on_thread_event: ThreadEventCallback) -> None:
        try:
            async with websockets.connect(
                self.events_url,
                additional_headers=self._headers(),
                ping_interval=30,
                ping_timeout=120,
                open_timeout=10,
            ) as websocket:
                logger.debug(f"Listening for events on {self.events_url}")
                async for raw in websocket:
                    await dispatch_frame(raw, on_message, on_thread_event)
        except (OSError, WebSocketException) as e:
            logger.error(f"Event stream closed: {e}")

    async def close(self) -> None:
        if self._listener is not None:
            if not self._listener.done():
                self._listener.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await self._listener
            elif not self._listener.cancelled() and self._listener.exception() is not None:
                logger.error(f"Event listener had stopped: {self._listener.exception()}")
            self._listener = None
        await self._client.aclose()

    async def get_thread_list(self, limit: int, cursor: str | None, folders: list[str]) -> list[Thread] | None:
        params: dict[str, Any] = {"limit": limit, "folder": folders}
        if cursor is not None:
            params["cursor"] = cursor
        data = await self._request("GET", "threads", params=params)
        threads = data.get("threads") if isinstance(data, dict) else None
        if threads is None:
            return None
        return [_validate(Thread, thread) for thread in threads]

    async def get_thread_info(self, thread_id: str) -> Thread:
        return _validate(Thread, await self._request("GET", f"threads/{thread_id}"))

    async def get_thread_history(self, thread_id: str, limit: int) -> list[Message]:
        data = await self._request("GET", f"threads/{thread_id}/messages", params={"limit": limit})
        messages = data.get("messages", []) if isinstance(data, dict) else []
        return [_validate(Message, message) for message in messages]

    async def send_message(self, body: str, thread_id: str) -> None:
        await self._request("POST", f"threads/{thread_id}/messages", json={"body": body})
