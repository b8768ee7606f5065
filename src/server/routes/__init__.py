"""Route registration helpers."""

from .chat import register_chat_routes
from .diary import register_diary_routes
from .settings import register_settings_routes

__all__ = [
    "register_chat_routes",
    "register_diary_routes",
    "register_settings_routes",
]
