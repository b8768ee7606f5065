"""Dependency helpers shared across FastAPI routes."""

from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from typing import List, Optional

from src.ai_diary.config import Config
from src.ai_diary.credentials import CredentialResolver
from src.ai_diary.logger import setup_logger
from src.ai_diary.openai_client import OpenAIClient
from src.ai_diary.responder import ChatResponder
from src.ai_diary.retry import RetryPolicy
from src.chat_history import Message, UserProfile, parse_timestamp
from src.diary import DiaryRecord, DiarySynthesizer

from .schemas import DiaryPayloadResponse, MessagePayload, UserProfilePayload


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Load configuration once and configure logging."""
    config = Config.from_yaml()
    setup_logger(log_level=config.log_level, log_file=config.log_file)
    return config


@lru_cache(maxsize=1)
def get_credential_resolver() -> CredentialResolver:
    """Singleton CredentialResolver holding the session-wide override."""
    config = get_config()
    return CredentialResolver(
        default_api_key=config.openai.api_key,
        default_model=config.openai.model,
    )


@lru_cache(maxsize=1)
def get_openai_client() -> OpenAIClient:
    """Singleton OpenAIClient configured with timeout and retry policy."""
    config = get_config()
    return OpenAIClient(
        timeout_seconds=config.openai.timeout_seconds,
        retry_policy=RetryPolicy(
            max_attempts=config.openai.max_retries + 1,
            base_delay=config.openai.retry_backoff_seconds,
        ),
    )


@lru_cache(maxsize=1)
def get_chat_responder() -> ChatResponder:
    """Singleton ChatResponder."""
    return ChatResponder(
        resolver=get_credential_resolver(),
        openai_client=get_openai_client(),
        config=get_config().chat,
    )


@lru_cache(maxsize=1)
def get_diary_synthesizer() -> DiarySynthesizer:
    """Singleton DiarySynthesizer."""
    return DiarySynthesizer(
        resolver=get_credential_resolver(),
        openai_client=get_openai_client(),
        config=get_config().diary,
    )


def reset_dependencies() -> None:
    """Drop cached singletons (used by tests and after config changes)."""
    for factory in (
        get_diary_synthesizer,
        get_chat_responder,
        get_openai_client,
        get_credential_resolver,
        get_config,
    ):
        factory.cache_clear()


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def to_message(payload: MessagePayload) -> Message:
    """Convert request message payload to domain Message."""
    return Message(
        text=payload.text,
        is_user=payload.is_user,
        timestamp=parse_timestamp(payload.timestamp),
    )


def to_messages(payloads: List[MessagePayload]) -> List[Message]:
    return [to_message(payload) for payload in payloads]


def to_user_profile(payload: Optional[UserProfilePayload]) -> Optional[UserProfile]:
    if payload is None:
        return None
    return UserProfile(name=payload.name, personality=payload.personality)


def serialize_diary(diary: DiaryRecord) -> DiaryPayloadResponse:
    """Convert domain DiaryRecord to API response."""
    return DiaryPayloadResponse(
        title=diary.title,
        content=diary.content,
        mood=diary.mood,
        weather=diary.weather,
        tags=list(diary.tags),
        date=diary.date,
        created_at=diary.created_at,
    )
