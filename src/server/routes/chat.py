"""Chat-related API routes."""

from __future__ import annotations

import asyncio
import logging

from fastapi import FastAPI, HTTPException

from src.chat_history import Message

from ..dependencies import (
    get_chat_responder,
    get_config,
    get_credential_resolver,
    now_iso,
    to_messages,
    to_user_profile,
)
from ..schemas import ChatRequest, ChatResponse, ChatStatusResponse

logger = logging.getLogger(__name__)


def register_chat_routes(app: FastAPI) -> None:
    """Register chat endpoints on the provided app."""

    @app.post("/api/chat", response_model=ChatResponse)
    async def chat(request: ChatRequest) -> ChatResponse:
        """Generate the assistant reply for the latest user message."""
        config = get_config()
        if not request.message or not request.message.strip():
            raise HTTPException(status_code=400, detail="メッセージが必要です。")
        limit = config.chat.max_message_length
        if len(request.message) > limit:
            raise HTTPException(
                status_code=400,
                detail=f"メッセージが長すぎます。{limit}文字以下にしてください。",
            )

        # 最新の発言を加えた末尾N件のみ送信
        history = to_messages(request.messages) + [Message.user(request.message)]
        history = history[-config.chat.history_window :]
        logger.info(f"Chat request: {request.message[:50]}...")

        responder = get_chat_responder()
        try:
            reply = await asyncio.to_thread(
                responder.respond,
                history,
                to_user_profile(request.user_profile),
                request.api_key,
                request.model,
            )
        except Exception as exc:  # pragma: no cover - responder does not raise
            logger.exception("Chat request failed: %s", exc)
            raise HTTPException(
                status_code=500, detail="チャット処理中にエラーが発生しました。"
            ) from exc
        return ChatResponse(response=reply, timestamp=now_iso())

    @app.get("/api/chat/status", response_model=ChatStatusResponse)
    async def chat_status() -> ChatStatusResponse:
        """Report whether live chat generation is configured."""
        credentials = get_credential_resolver().resolve()
        return ChatStatusResponse(
            available=True,
            openai_configured=credentials.available,
            model=credentials.model,
            timestamp=now_iso(),
        )
