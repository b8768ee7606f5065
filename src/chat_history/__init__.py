"""Chat History

ブラウザから送られてくる会話ログのモデルと日付フィルタを提供します。

Design Reference: doc/design/chat_history.md
"""

from .date_filter import select_for_date
from .models import Message, UserProfile, parse_timestamp

__all__ = [
    "Message",
    "UserProfile",
    "parse_timestamp",
    "select_for_date",
]
