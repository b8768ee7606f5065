"""
モデル出力（JSON）の読み取り

モデルが返すJSONは形が保証されないため、各項目を任意項目として
読み取り、欠けている項目や型の合わない項目は後段でデフォルト値に置き換える。
JSONとして読めない出力は空オブジェクトとして扱う。
"""

import json
import logging
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .models import DEFAULT_MOOD, MOOD_VALUES, DiaryRecord

FALLBACK_CONTENT = "チャット履歴から日記を生成できませんでした。"

logger = logging.getLogger(__name__)


def _non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class DiaryPayload(BaseModel):
    """モデル出力の各項目（すべて任意）"""

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    content: Optional[str] = None
    mood: Optional[str] = None
    weather: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator("title", "content", "weather", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        return _non_empty_str(value)

    @field_validator("mood", mode="before")
    @classmethod
    def _coerce_mood(cls, value: Any) -> Optional[str]:
        mood = _non_empty_str(value)
        return mood if mood in MOOD_VALUES else None

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> Optional[List[str]]:
        if not isinstance(value, list):
            return None
        return [tag.strip() for tag in value if isinstance(tag, str) and tag.strip()]

    def to_record(self, target_date: str, created_at: str) -> DiaryRecord:
        """デフォルト値を補って日記エントリーを組み立てる

        日付と作成日時は常に呼び出し側の値を使う。
        """
        return DiaryRecord(
            title=self.title or f"{target_date}の日記",
            content=self.content or FALLBACK_CONTENT,
            mood=self.mood or DEFAULT_MOOD,
            weather=self.weather,
            tags=self.tags or [],
            date=target_date,
            created_at=created_at,
        )


def parse_diary_output(text: Optional[str]) -> DiaryPayload:
    """モデル出力の文字列を DiaryPayload に変換（失敗時は空のペイロード）"""
    try:
        data = json.loads(text or "{}")
    except json.JSONDecodeError as e:
        logger.warning(f"Diary output is not valid JSON, using defaults: {e}")
        data = {}

    if not isinstance(data, dict):
        logger.warning(f"Diary output is not a JSON object: {type(data).__name__}")
        data = {}

    return DiaryPayload.model_validate(data)
