"""The Messer session: thread cache, lock state and command entry point."""

import functools
import logging
from enum import Enum
from typing import Any

from messer_cli import events
from messer_cli.backend.base import Backend, User
from messer_cli.commands import CommandDispatcher
from messer_cli.errors import BackendError, FriendNotFoundError, MesserError, ThreadNotFoundError
from messer_cli.lock import LockState
from messer_cli.repl import run_repl
from messer_cli.settings import Settings, settings
from messer_cli.terminal import console, notify_terminal
from messer_cli.threads import Thread, ThreadCache

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    LISTENING = "listening"
    TERMINATED = "terminated"


class Session:
    """One logged-in user's view of the messaging backend.

    Handlers and event callbacks receive the session explicitly and use it to
    query threads; nothing here is process-global.
    """

    def __init__(self, backend: Backend, config: Settings | None = None) -> None:
        self.backend = backend
        self.settings = config or settings

        self.threads = ThreadCache()
        self.lock = LockState()
        self.dispatcher = CommandDispatcher(self.lock)

        self.state = SessionState.UNAUTHENTICATED
        self.last_thread: Thread | None = None
        self.unread_messages_count = 0

    @property
    def user(self) -> User:
        if self.backend.user is None:
            raise MesserError("Not logged in")
        return self.backend.user

    @property
    def is_listening(self) -> bool:
        return self.state is SessionState.LISTENING

    async def login(self) -> User:
        self.state = SessionState.AUTHENTICATING
        try:
            user = await self.backend.login()
        except BackendError:
            self.state = SessionState.TERMINATED
            raise

        self.state = SessionState.LISTENING
        await self.backend.listen(
            functools.partial(events.on_message, self),
            functools.partial(events.on_thread_event, self),
        )
        return user

    async def start(self) -> SessionState:
        """Log in, warm the thread cache and run the REPL until logout or end of input."""
        notify_terminal()
        try:
            user = await self.login()
        except BackendError as e:
            logger.error(f"Login failed: {e}")
            console.print(str(e), style="red", markup=False)
            await self.backend.close()
            return self.state

        console.print(f"Successfully logged in as {user.name}", style="green")
        try:
            await self.refresh_thread_list()
        except BackendError as e:
            logger.warning(f"Could not refresh thread list: {e}")

        await run_repl(self)

        if self.state is not SessionState.TERMINATED:
            await self.backend.close()
            self.state = SessionState.TERMINATED
        return self.state

    async def start_single(self, raw_command: str) -> Any:
        """Log in and run exactly one command."""
        try:
            await self.login()
        except BackendError as e:
            logger.error(f"Login failed: {e}")
            console.print(str(e), style="red", markup=False)
            await self.backend.close()
            return None

        try:
            return await self.process_command(raw_command)
        except MesserError as e:
            logger.error(f"Command failed: {e}")
            console.print(str(e), style="red", markup=False)
            return None
        finally:
            if self.state is not SessionState.TERMINATED:
                await self.backend.close()
                self.state = SessionState.TERMINATED

    async def process_command(self, raw_command: str) -> Any:
        """Execute one line of user input."""
        self.clear()  # typing means new messages have been read

        if not raw_command.strip():
            return None

        command, line = self.dispatcher.route(raw_command)
        logger.debug(f"Dispatching {command.name!r}")
        return await command.handler(line, self)

    async def refresh_thread_list(self) -> list[Thread]:
        threads = await self.backend.get_thread_list(
            self.settings.thread_list_limit,
            None,
            self.settings.thread_list_folders,
        )
        if not threads:
            raise BackendError("Nothing returned from thread list")

        for thread in threads:
            self.cache_thread(thread)
        return threads

    def cache_thread(self, thread: Thread) -> Thread:
        return self.threads.put(thread)

    async def get_thread_by_name(self, thread_name: str) -> Thread:
        """Resolve a typed, possibly partial thread name, ignoring case.

        Cached thread names are tried first, most recently active first. Failing
        that, the friends list is searched alphabetically and a minimal thread is
        built from the friend, without caching it.
        """
        thread_id = self.threads.find_id_by_prefix(thread_name)

        if thread_id is None:
            needle = thread_name.lower()
            friends = sorted(self.user.friends, key=lambda friend: friend.full_name.lower())
            friend = next((f for f in friends if f.full_name.lower().startswith(needle)), None)
            if friend is None:
                raise ThreadNotFoundError(thread_name)
            return Thread(id=friend.user_id, name=friend.full_name)

        thread = await self.get_thread_by_id(thread_id)
        if not thread.name:
            thread = thread.model_copy(update={"name": thread_name})
        return thread

    async def get_thread_by_id(self, thread_id: str, require_name: bool = False) -> Thread:
        cached = self.threads.get_by_id(thread_id)
        if cached is not None:
            return cached

        thread = await self.backend.get_thread_info(thread_id)

        if not thread.name and require_name:
            if thread_id == self.user.id:
                friend_name = self.user.name
            else:
                friend = self.user.find_friend(thread_id)
                if friend is None:
                    raise FriendNotFoundError(thread_id)
                friend_name = friend.full_name
            thread = thread.model_copy(update={"name": friend_name})

        return self.cache_thread(thread)

    def sender_name(self, user_id: str) -> str:
        user = self.user
        if user_id == user.id:
            return "You"
        friend = user.find_friend(user_id)
        if friend is not None:
            return friend.full_name
        return user_id

    def clear(self) -> None:
        """Reset the unread counter shown in the terminal title."""
        if self.unread_messages_count == 0:
            return
        self.unread_messages_count = 0
        notify_terminal()

    async def logout(self) -> None:
        await self.backend.logout()
        await self.backend.close()
        self.state = SessionState.TERMINATED
