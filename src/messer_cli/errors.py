class MesserError(Exception):
    pass


class InvalidCommandError(MesserError):
    def __init__(self, message: str = "Invalid command - check your syntax") -> None:
        super().__init__(message)


class NoActiveThreadError(InvalidCommandError):
    def __init__(self) -> None:
        super().__init__("No thread to reply to - receive or send a message first")


class ThreadNotFoundError(MesserError):
    def __init__(self, thread_name: str) -> None:
        super().__init__(f"No thread could be found for '{thread_name}'")
        self.thread_name = thread_name


class FriendNotFoundError(MesserError):
    def __init__(self, thread_id: str) -> None:
        super().__init__("Friend could not be found for thread")
        self.thread_id = thread_id


class BackendError(MesserError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class LoginFailedError(BackendError):
    pass
