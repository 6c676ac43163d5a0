"""In-memory thread cache with a secondary name index."""

from pydantic import BaseModel, ConfigDict, Field


class Thread(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str | None = None
    color: str | None = None
    last_message_timestamp: int | None = None
    unread_count: int = Field(default=0, ge=0)


class ThreadCache:
    """Maps thread ids to threads and exact thread names to ids.

    Entries are only ever overwritten, never evicted. Each id carries at most one
    name in the index: when a thread is re-cached under a new name (or without a
    name) the stale index entry is dropped.
    """

    def __init__(self) -> None:
        self._threads: dict[str, Thread] = {}
        self._name_to_id: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._threads)

    def __contains__(self, thread_id: object) -> bool:
        return thread_id in self._threads

    def put(self, thread: Thread) -> Thread:
        cached = Thread(
            id=thread.id,
            name=thread.name,
            color=thread.color,
            last_message_timestamp=thread.last_message_timestamp,
            unread_count=thread.unread_count,
        )

        previous = self._threads.get(thread.id)
        if previous is not None and previous.name and previous.name != thread.name:
            if self._name_to_id.get(previous.name) == thread.id:
                del self._name_to_id[previous.name]

        self._threads[thread.id] = cached
        if thread.name:
            self._name_to_id[thread.name] = thread.id
        return cached

    def get_by_id(self, thread_id: str) -> Thread | None:
        return self._threads.get(thread_id)

    def get_id_by_name(self, name: str) -> str | None:
        return self._name_to_id.get(name)

    def find_id_by_prefix(self, prefix: str) -> str | None:
        """Return the id of a thread whose name starts with ``prefix``, ignoring case.

        An exact name (ignoring case) always wins. Otherwise the most recently active
        thread wins and ties are broken alphabetically.
        """
        needle = prefix.lower()
        matches = [name for name in self._name_to_id if name.lower().startswith(needle)]
        if not matches:
            return None

        def rank(name: str) -> tuple[bool, int, str]:
            thread = self._threads.get(self._name_to_id[name])
            timestamp = thread.last_message_timestamp if thread is not None else None
            return (name.lower() != needle, -(timestamp or 0), name.lower())

        return self._name_to_id[min(matches, key=rank)]

    def recent(self, limit: int | None = None) -> list[Thread]:
        threads = sorted(
            self._threads.values(),
            key=lambda t: (-(t.last_message_timestamp or 0), (t.name or t.id).lower()),
        )
        return threads if limit is None else threads[:limit]
