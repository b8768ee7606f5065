"""Health check and credential settings endpoints."""

from __future__ import annotations

import asyncio
import logging

from fastapi import FastAPI, HTTPException

from src.ai_diary.credentials import is_valid_api_key
from src.ai_diary.openai_client import ProviderError

from ..dependencies import get_config, get_credential_resolver, get_openai_client, now_iso
from ..schemas import ConfigRequest, ConfigResponse, HealthResponse, KeyTestResponse

logger = logging.getLogger(__name__)

KEY_TEST_ERRORS = {
    401: "無効なAPIキーです",
    403: "APIキーにアクセス権限がありません",
    429: "API利用制限に達しています",
}
MAX_LISTED_MODELS = 10


def register_settings_routes(app: FastAPI) -> None:
    """Register health check and credential configuration endpoints."""

    @app.get("/health", response_model=HealthResponse)
    @app.get("/api/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Simple health check endpoint."""
        return HealthResponse(
            status="OK",
            timestamp=now_iso(),
            environment=get_config().environment,
            openai_configured=get_credential_resolver().is_available(),
        )

    @app.post("/api/config", response_model=ConfigResponse)
    async def save_config(request: ConfigRequest) -> ConfigResponse:
        """Store the API key/model as the session-wide override."""
        if not is_valid_api_key(request.openai_api_key):
            raise HTTPException(
                status_code=400,
                detail="有効なOpenAI APIキーを入力してください（sk-で始まる）",
            )
        resolver = get_credential_resolver()
        resolver.configure(request.openai_api_key, request.openai_model)
        return ConfigResponse(
            success=True,
            message="設定を保存しました",
            model=resolver.resolve().model,
        )

    @app.delete("/api/config", response_model=ConfigResponse)
    async def clear_config() -> ConfigResponse:
        """Remove the session-wide override."""
        resolver = get_credential_resolver()
        resolver.reset()
        return ConfigResponse(
            success=True, message="設定をリセットしました", model=resolver.resolve().model
        )

    @app.post("/api/test-key", response_model=KeyTestResponse)
    async def test_key(request: ConfigRequest) -> KeyTestResponse:
        """Verify an API key by listing the provider's models."""
        if not is_valid_api_key(request.openai_api_key):
            return KeyTestResponse(valid=False, error="無効なAPIキー形式です")

        credentials = get_credential_resolver().resolve(
            request.openai_api_key, request.openai_model
        )
        client = get_openai_client()
        try:
            model_ids = await asyncio.to_thread(client.list_models, credentials)
        except ProviderError as exc:
            logger.warning("API key test failed: %s", exc)
            return KeyTestResponse(
                valid=False,
                error=KEY_TEST_ERRORS.get(exc.status_code, "APIキーのテストに失敗しました"),
                details=exc.message if get_config().is_development else None,
            )

        chat_models = [
            model_id for model_id in model_ids if "gpt" in model_id and "instruct" not in model_id
        ]
        return KeyTestResponse(
            valid=True,
            message="APIキーは有効です",
            model=credentials.model,
            model_available=credentials.model in model_ids,
            available_models=chat_models[:MAX_LISTED_MODELS],
        )

