"""Models and protocol for the remote messaging backend."""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field

from messer_cli.threads import Thread


class Friend(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user_id: str
    full_name: str


class User(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    friends: list[Friend] = Field(default_factory=list)

    def find_friend(self, user_id: str) -> Friend | None:
        return next((friend for friend in self.friends if friend.user_id == user_id), None)


class Message(BaseModel):
    model_config = ConfigDict(extra="ignore")

    thread_id: str
    sender_id: str
    body: str = ""
    timestamp: int | None = None


class ThreadEvent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    thread_id: str
    type: str
    author_id: str | None = None
    thread: Thread | None = None
    data: dict[str, Any] = Field(default_factory=dict)


class Credentials(BaseModel):
    email: str
    password: str


MessageCallback = Callable[[Message], Awaitable[None]]
ThreadEventCallback = Callable[[ThreadEvent], Awaitable[None]]


class Backend(Protocol):
    """What the session needs from a messaging backend.

    Every method raises ``BackendError`` when the remote side fails.
    """

    user: User | None
    prompt_credentials: Callable[[], Awaitable[Credentials]]
    get_mfa_code: Callable[[], Awaitable[str]]

    async def login(self) -> User: ...

    async def logout(self) -> None: ...

    async def listen(self, on_message: MessageCallback, on_thread_event: ThreadEventCallback) -> None: ...

    async def close(self) -> None: ...

    async def get_thread_list(self, limit: int, cursor: str | None, folders: list[str]) -> list[Thread] | None: ...

    async def get_thread_info(self, thread_id: str) -> Thread: ...

    async def get_thread_history(self, thread_id: str, limit: int) -> list[Message]: ...

    async def send_message(self, body: str, thread_id: str) -> None: ...
