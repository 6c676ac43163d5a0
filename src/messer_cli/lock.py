class LockState:
    """Holds at most one pinned thread name that plain input is sent to."""

    def __init__(self) -> None:
        self._target: str | None = None

    @property
    def target(self) -> str | None:
        return self._target

    @property
    def is_locked(self) -> bool:
        return bool(self._target)

    def lock(self, target: str) -> None:
        self._target = target

    def unlock(self) -> None:
        self._target = None
