from messer_cli.backend.base import Backend, Credentials, Friend, Message, ThreadEvent, User

__all__ = ["Backend", "Credentials", "Friend", "Message", "ThreadEvent", "User"]
