"""FastAPI application bootstrap."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .dependencies import get_config, get_credential_resolver, reset_dependencies
from .routes import (
    register_chat_routes,
    register_diary_routes,
    register_settings_routes,
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    get_config()
    app = FastAPI(title="AI Diary API", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_settings_routes(app)
    register_chat_routes(app)
    register_diary_routes(app)

    return app


app = create_app()

__all__ = ["app", "create_app", "get_credential_resolver", "reset_dependencies"]
