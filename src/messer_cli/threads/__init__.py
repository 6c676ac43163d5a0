from messer_cli.threads.cache import Thread, ThreadCache

__all__ = ["Thread", "ThreadCache"]
