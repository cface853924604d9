"""Route registration helpers."""

from .chat import register_chat_routes
from .health import register_health_routes

__all__ = [
    "register_chat_routes",
    "register_health_routes",
]
