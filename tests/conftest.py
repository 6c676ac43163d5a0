from typing import Any

import pytest

from messer_cli.backend.base import Friend, Message, MessageCallback, ThreadEventCallback, User
from messer_cli.errors import BackendError, LoginFailedError
from messer_cli.session import Session, SessionState
from messer_cli.threads import Thread


class FakeBackend:
    """In-memory stand-in for the messaging gateway that records every call."""

    def __init__(
        self,
        threads: list[Thread] | None = None,
        thread_list: list[Thread] | None = None,
        fail_login: bool = False,
    ) -> None:
        self.user: User | None = None
        self.account = User(
            id="1",
            name="Me Myself",
            friends=[
                Friend(user_id="42", full_name="Bob Smith"),
                Friend(user_id="43", full_name="Carol Jones"),
                Friend(user_id="44", full_name="Bobby Tables"),
            ],
        )
        self.thread_info: dict[str, Thread] = {thread.id: thread for thread in threads or []}
        self.thread_list = thread_list
        self.history: dict[str, list[Message]] = {}
        self.fail_login = fail_login

        self.calls: list[tuple[Any, ...]] = []
        self.sent: list[tuple[str, str]] = []
        self.on_message: MessageCallback | None = None
        self.on_thread_event: ThreadEventCallback | None = None
        self.logged_out = False
        self.closed = False

    async def prompt_credentials(self) -> Any:
        raise AssertionError("FakeBackend never prompts")

    async def get_mfa_code(self) -> str:
        raise AssertionError("FakeBackend never prompts")

    async def login(self) -> User:
        self.calls.append(("login",))
        if self.fail_login:
            raise LoginFailedError("Login failed: bad credentials", status_code=401)
        self.user = self.account
        return self.user

    async def logout(self) -> None:
        self.calls.append(("logout",))
        self.logged_out = True

    async def listen(self, on_message: MessageCallback, on_thread_event: ThreadEventCallback) -> None:
        self.on_message = on_message
        self.on_thread_event = on_thread_event

    async def close(self) -> None:
        self.closed = True

    async def get_thread_list(self, limit: int, cursor: str | None, folders: list[str]) -> list[Thread] | None:
        self.calls.append(("get_thread_list", limit, cursor, tuple(folders)))
        return self.thread_list

    async def get_thread_info(self, thread_id: str) -> Thread:
        self.calls.append(("get_thread_info", thread_id))
        if thread_id not in self.thread_info:
            raise BackendError("Thread not found", status_code=404)
        return self.thread_info[thread_id]

    async def get_thread_history(self, thread_id: str, limit: int) -> list[Message]:
        self.calls.append(("get_thread_history", thread_id, limit))
        return self.history.get(thread_id, [])[-limit:]

    async def send_message(self, body: str, thread_id: str) -> None:
        self.sent.append((body, thread_id))

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def session(backend: FakeBackend) -> Session:
    """A session that is already logged in and listening."""
    session = Session(backend)
    backend.user = backend.account
    session.state = SessionState.LISTENING
    return session
