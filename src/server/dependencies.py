"""Dependency helpers shared across FastAPI routes."""

from __future__ import annotations

from functools import lru_cache

from src.chat_history import ChatMessage, SessionStore, create_session_store
from src.workflow_relay.config import Config
from src.workflow_relay.logger import setup_logger
from src.workflow_relay.relay import ChatRelay
from src.workflow_relay.upstream_client import WorkflowClient

from .schemas import HistoryMessage

config = Config.load()
setup_logger(log_level=config.log_level, log_file=config.log_file)


@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    """Singleton SessionStore (PostgreSQL, SQLite or no-op)."""
    return create_session_store(config.database)


@lru_cache(maxsize=1)
def get_workflow_client() -> WorkflowClient:
    """Singleton WorkflowClient."""
    return WorkflowClient(config.upstream)


@lru_cache(maxsize=1)
def get_chat_relay() -> ChatRelay:
    """Singleton ChatRelay wired to the shared client and store."""
    return ChatRelay(get_workflow_client(), get_session_store())


def close_session_store() -> None:
    """Close the store if it was ever created."""
    if get_session_store.cache_info().currsize:
        get_session_store().close()
        get_session_store.cache_clear()


def serialize_message(message: ChatMessage) -> HistoryMessage:
    """Convert a stored ChatMessage to its API model."""
    return HistoryMessage(
        role=message.role,
        content=message.content,
        created_at=message.created_at,
    )
