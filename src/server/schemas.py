"""Pydantic schemas for the FastAPI server."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MessagePayload(BaseModel):
    """Single chat message as stored in the browser."""

    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(default="", description="メッセージ本文")
    is_user: bool = Field(default=False, alias="isUser", description="ユーザーの発言ならtrue")
    timestamp: Optional[str] = Field(default=None, description="ISO8601形式の送受信時刻")


class UserProfilePayload(BaseModel):
    """User profile used to adjust the assistant tone."""

    name: Optional[str] = None
    personality: Optional[str] = None


class ChatRequest(BaseModel):
    """Request body for chat endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    message: Optional[str] = Field(default=None, description="ユーザーの新しい発言")
    messages: List[MessagePayload] = Field(default_factory=list, description="これまでの会話履歴")
    user_profile: Optional[UserProfilePayload] = Field(default=None, alias="userProfile")
    api_key: Optional[str] = Field(default=None, alias="apiKey")
    model: Optional[str] = Field(default=None, description="このリクエストで使うモデル名")


class ChatResponse(BaseModel):
    """Response body for chat endpoint."""

    success: bool = True
    response: str
    timestamp: str


class ChatStatusResponse(BaseModel):
    """Response for chat status endpoint."""

    available: bool
    openai_configured: bool
    model: str
    timestamp: str


class DiaryGenerateRequest(BaseModel):
    """Request body for diary generation endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    messages: Optional[List[MessagePayload]] = Field(default=None, description="会話ログ全体")
    date: Optional[str] = Field(default=None, description="対象日（YYYY-MM-DD）")
    api_key: Optional[str] = Field(default=None, alias="apiKey")
    model: Optional[str] = None


class DiaryPayloadResponse(BaseModel):
    """Serialized diary entry."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    content: str
    mood: str
    weather: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    date: str
    created_at: str = Field(..., alias="createdAt")


class DiaryGenerateResponse(BaseModel):
    """Response body for diary generation endpoint."""

    success: bool = True
    diary: DiaryPayloadResponse
    demo: bool = False
    timestamp: str


class DiaryStatusResponse(BaseModel):
    """Response for diary status endpoint."""

    available: bool
    openai_configured: bool
    model: str
    features: Dict[str, bool]
    timestamp: str


class DiaryValidateRequest(BaseModel):
    """Request body for diary validation endpoint."""

    diary: Optional[Dict[str, Any]] = None


class DiaryValidateResponse(BaseModel):
    """Response for diary validation endpoint."""

    valid: bool
    message: Optional[str] = None
    error: Optional[str] = None


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str
    timestamp: str
    environment: str
    openai_configured: bool


class ConfigRequest(BaseModel):
    """Request body for session credential configuration."""

    openai_api_key: Optional[str] = Field(default=None, description="sk-で始まるOpenAI APIキー")
    openai_model: Optional[str] = Field(default=None, description="使用するモデル名")


class ConfigResponse(BaseModel):
    """Response for session credential configuration."""

    success: bool
    message: str
    model: Optional[str] = None


class KeyTestResponse(BaseModel):
    """Response for API key test endpoint."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    valid: bool
    message: Optional[str] = None
    error: Optional[str] = None
    model: Optional[str] = None
    model_available: Optional[bool] = Field(default=None, alias="modelAvailable")
    available_models: List[str] = Field(default_factory=list, alias="availableModels")
    details: Optional[str] = None
