"""Chat History Models

チャット履歴のデータモデル定義。
メッセージはブラウザ側で作成・保存され、サーバーは受け取った履歴を読むだけ。

Design Reference: doc/design/chat_history.md
Related Modules: date_filter.py
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional


def parse_timestamp(value: Any) -> Optional[datetime]:
    """ISO8601文字列をdatetimeに変換（解釈できない場合はNone）

    末尾の "Z" はUTCとして扱う。
    """
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class Message:
    """会話の1ターン

    timestampは呼び出し側（ブラウザ）が作成時に付与する。
    """

    text: str
    is_user: bool
    timestamp: Optional[datetime] = None

    @property
    def role(self) -> str:
        """OpenAIのメッセージロール"""
        return "user" if self.is_user else "assistant"

    @property
    def speaker(self) -> str:
        """日記用トランスクリプトでの話者ラベル"""
        return "ユーザー" if self.is_user else "AI"

    @classmethod
    def user(cls, text: str, timestamp: Optional[datetime] = None) -> "Message":
        return cls(text=text, is_user=True, timestamp=timestamp or datetime.now(timezone.utc))


@dataclass(frozen=True, slots=True)
class UserProfile:
    """チャット応答の口調調整に使うユーザー情報"""

    name: Optional[str] = None
    personality: Optional[str] = None
