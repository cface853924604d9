"""Chat History Management

Session registration and transcript persistence for the relay.
"""

from .models import ChatMessage, Role
from .repository import (
    NullSessionStore,
    PostgresSessionStore,
    SessionStore,
    SqliteSessionStore,
    create_session_store,
)

__all__ = [
    "ChatMessage",
    "Role",
    "NullSessionStore",
    "PostgresSessionStore",
    "SessionStore",
    "SqliteSessionStore",
    "create_session_store",
]
