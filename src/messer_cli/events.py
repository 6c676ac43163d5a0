"""Callbacks for events pushed by the backend."""

import logging
from typing import TYPE_CHECKING

from messer_cli.backend.base import Message, ThreadEvent
from messer_cli.errors import MesserError
from messer_cli.terminal import console, notify_terminal
from messer_cli.threads import Thread

if TYPE_CHECKING:
    from messer_cli.session import Session

logger = logging.getLogger(__name__)


def format_message(sender: str, thread: Thread, body: str) -> str:
    if thread.name and thread.name != sender:
        return f"{sender} @ {thread.name}: {body}"
    return f"{sender}: {body}"


async def on_message(session: "Session", message: Message) -> None:
    try:
        thread = await session.get_thread_by_id(message.thread_id, require_name=True)
    except MesserError as e:
        logger.warning(f"Could not resolve thread {message.thread_id}: {e}")
        thread = Thread(id=message.thread_id)
    else:
        if message.timestamp is not None:
            thread = session.cache_thread(thread.model_copy(update={"last_message_timestamp": message.timestamp}))

    sender = session.sender_name(message.sender_id)
    if message.sender_id != session.user.id:
        session.last_thread = thread
        session.unread_messages_count += 1
        notify_terminal(session.unread_messages_count)

    console.print(format_message(sender, thread, message.body), markup=False, highlight=False)


async def on_thread_event(session: "Session", event: ThreadEvent) -> None:
    if event.thread is not None:
        session.cache_thread(event.thread)
    logger.info(f"Thread event {event.type} in {event.thread_id}")
