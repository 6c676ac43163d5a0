"""Messer - an interactive command-driven messaging client."""

from messer_cli.session import Session, SessionState

__all__ = ["Session", "SessionState"]
