"""Diary Models

日記エントリーと日記生成結果のデータモデル定義。

Design Reference: doc/design/diary.md
Related Classes: DiarySynthesizer (synthesizer.py)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class DiaryMood(str, Enum):
    """日記の気分（5段階）"""

    BEST = "最高"
    GOOD = "良い"
    SO_SO = "まあまあ"
    BAD = "悪い"
    WORST = "最悪"


DEFAULT_MOOD = DiaryMood.SO_SO.value
MOOD_VALUES = tuple(mood.value for mood in DiaryMood)


class DiaryErrorKind(str, Enum):
    """日記生成の失敗種別"""

    INVALID_DATE = "invalid_date"
    NO_MESSAGES_FOR_DATE = "no_messages_for_date"
    EMPTY_CHAT_CONTENT = "empty_chat_content"
    GENERATION_FAILED = "generation_failed"


@dataclass(slots=True)
class DiaryRecord:
    """1日分の日記エントリー"""

    title: str
    content: str
    mood: str
    weather: Optional[str]
    tags: List[str]
    date: str  # YYYY-MM-DD
    created_at: str  # ISO8601形式


@dataclass(slots=True)
class DiaryError:
    """ユーザーに表示できる日記生成エラー

    detailはAPI側の生のエラー内容で、開発環境でのみ返す。
    """

    kind: DiaryErrorKind
    message: str
    detail: Optional[str] = None


@dataclass(slots=True)
class DiaryResult:
    """日記生成の結果（成功時はdiary、失敗時はerror）"""

    success: bool
    diary: Optional[DiaryRecord] = None
    error: Optional[DiaryError] = None
    demo: bool = field(default=False)

    @classmethod
    def ok(cls, diary: DiaryRecord, demo: bool = False) -> "DiaryResult":
        return cls(success=True, diary=diary, demo=demo)

    @classmethod
    def fail(
        cls, kind: DiaryErrorKind, message: str, detail: Optional[str] = None
    ) -> "DiaryResult":
        return cls(success=False, error=DiaryError(kind=kind, message=message, detail=detail))


def parse_target_date(value: str) -> date:
    """YYYY-MM-DD形式の文字列を日付に変換

    Raises:
        ValueError: 形式が不正、または存在しない日付の場合
    """
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise ValueError(f"invalid date format: {value!r}")
    return date.fromisoformat(value)
