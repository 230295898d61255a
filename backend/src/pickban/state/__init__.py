"""Externally fed state holders."""

from pickban.state.chat import ChatState
from pickban.state.session_context import SessionContext, SessionSnapshot

__all__ = [
    "ChatState",
    "SessionContext",
    "SessionSnapshot",
]
