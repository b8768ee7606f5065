"""Diary endpoints."""

from __future__ import annotations

import asyncio
import logging

from fastapi import FastAPI, HTTPException

from src.diary import parse_target_date
from src.diary.synthesizer import INVALID_DATE_MESSAGE

from ..dependencies import (
    get_config,
    get_credential_resolver,
    get_diary_synthesizer,
    now_iso,
    serialize_diary,
    to_messages,
)
from ..schemas import (
    DiaryGenerateRequest,
    DiaryGenerateResponse,
    DiaryStatusResponse,
    DiaryValidateRequest,
    DiaryValidateResponse,
)

logger = logging.getLogger(__name__)

REQUIRED_DIARY_FIELDS = ("title", "content", "date")


def register_diary_routes(app: FastAPI) -> None:
    """Register diary generation endpoints."""

    @app.post("/api/diary/generate", response_model=DiaryGenerateResponse)
    async def generate_diary(request: DiaryGenerateRequest) -> DiaryGenerateResponse:
        """Generate a diary entry from the chat history of the requested date."""
        if request.messages is None:
            raise HTTPException(status_code=400, detail="チャット履歴が必要です。")
        if not request.date:
            raise HTTPException(status_code=400, detail="日付が必要です。")
        try:
            target_date = parse_target_date(request.date)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=INVALID_DATE_MESSAGE) from exc

        logger.info(
            f"Diary generation request: {request.date}, {len(request.messages)} messages"
        )
        synthesizer = get_diary_synthesizer()
        try:
            result = await asyncio.to_thread(
                synthesizer.generate,
                to_messages(request.messages),
                target_date,
                request.api_key,
                request.model,
            )
        except Exception as exc:  # pragma: no cover - synthesizer does not raise
            logger.exception("Diary generation failed: %s", exc)
            raise HTTPException(
                status_code=500, detail="日記生成中にエラーが発生しました。"
            ) from exc

        if not result.success:
            error = result.error
            detail = error.message
            if error.detail and get_config().is_development:
                detail = f"{detail} ({error.detail})"
            logger.warning(f"Diary generation rejected ({error.kind.value}): {error.message}")
            raise HTTPException(status_code=400, detail=detail)

        return DiaryGenerateResponse(
            diary=serialize_diary(result.diary),
            demo=result.demo,
            timestamp=now_iso(),
        )

    @app.get("/api/diary/status", response_model=DiaryStatusResponse)
    async def diary_status() -> DiaryStatusResponse:
        """Report diary generation availability."""
        credentials = get_credential_resolver().resolve()
        return DiaryStatusResponse(
            available=True,
            openai_configured=credentials.available,
            model=credentials.model,
            features={"chat_to_diary": True, "json_response": True},
            timestamp=now_iso(),
        )

    @app.post("/api/diary/validate", response_model=DiaryValidateResponse)
    async def validate_diary(request: DiaryValidateRequest) -> DiaryValidateResponse:
        """Check that an edited diary entry has the required fields."""
        diary = request.diary
        if not diary:
            raise HTTPException(status_code=400, detail="日記データが必要です。")

        missing = [name for name in REQUIRED_DIARY_FIELDS if not diary.get(name)]
        if missing:
            raise HTTPException(
                status_code=400,
                detail=f"必須フィールドが不足しています: {', '.join(missing)}",
            )

        try:
            parse_target_date(diary["date"])
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=INVALID_DATE_MESSAGE) from exc

        return DiaryValidateResponse(valid=True, message="日記データは有効です。")
