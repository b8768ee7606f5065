"""Date Filter

会話ログから指定日のメッセージだけを取り出す。

日付境界は [当日0時, 翌日0時) で、タイムゾーンは設定値（既定UTC）に合わせる。
タイムスタンプのないメッセージは対象日に属すると判断できないため除外する。
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo

from .models import Message

logger = logging.getLogger(__name__)


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """タイムゾーン名をtzinfoに変換（未指定はUTC）"""
    if not name or name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def day_bounds(target: date, tz: tzinfo) -> Tuple[datetime, datetime]:
    """指定日の開始時刻と翌日の開始時刻"""
    start = datetime.combine(target, time.min, tzinfo=tz)
    end = datetime.combine(target + timedelta(days=1), time.min, tzinfo=tz)
    return start, end


def localize(timestamp: datetime, tz: tzinfo) -> datetime:
    """タイムスタンプを基準タイムゾーンに揃える（naiveは基準タイムゾーンとみなす）"""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=tz)
    return timestamp.astimezone(tz)


def select_for_date(
    messages: Iterable[Message], target: date, tz: Optional[tzinfo] = None
) -> List[Message]:
    """
    指定日に送受信されたメッセージを元の順序のまま返す

    Args:
        messages: 会話ログ（時系列順）
        target: 対象日
        tz: 日付境界の基準タイムゾーン（省略時UTC）

    Returns:
        start <= timestamp < end を満たすメッセージのリスト（該当なしは空リスト）
    """
    tz = tz or resolve_timezone(None)
    start, end = day_bounds(target, tz)

    selected: List[Message] = []
    skipped = 0
    for message in messages:
        if message.timestamp is None:
            skipped += 1
            continue
        if start <= localize(message.timestamp, tz) < end:
            selected.append(message)

    if skipped:
        logger.debug(f"Skipped {skipped} message(s) without timestamp for {target.isoformat()}")
    return selected
