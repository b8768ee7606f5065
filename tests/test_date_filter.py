"""日付フィルタのテスト"""

from datetime import date, datetime, timedelta, timezone

from src.chat_history import Message, parse_timestamp, select_for_date
from src.chat_history.date_filter import day_bounds, resolve_timezone

from conftest import utc


def test_selects_only_messages_of_target_day(multi_day_messages):
    """前日・翌日のメッセージは隣接していても含まれない"""
    selected = select_for_date(multi_day_messages, date(2024, 5, 1))

    assert [m.text for m in selected] == ["今日は公園に行った", "楽しそうですね"]


def test_boundaries_are_half_open(multi_day_messages):
    """0時ちょうどは当日に含まれ、翌日0時は含まれない"""
    selected = select_for_date(multi_day_messages, date(2024, 5, 2))

    assert [m.text for m in selected] == ["明日は雨らしい"]


def test_preserves_original_order():
    """入力順を保持する（時刻順に並べ替えない）"""
    messages = [
        Message(text="二番目", is_user=True, timestamp=utc(2024, 5, 1, 12)),
        Message(text="一番目", is_user=True, timestamp=utc(2024, 5, 1, 8)),
    ]

    selected = select_for_date(messages, date(2024, 5, 1))

    assert [m.text for m in selected] == ["二番目", "一番目"]


def test_messages_without_timestamp_are_excluded():
    """タイムスタンプのないメッセージは除外"""
    messages = [
        Message(text="時刻なし", is_user=True, timestamp=None),
        Message(text="時刻あり", is_user=True, timestamp=utc(2024, 5, 1, 9)),
    ]

    selected = select_for_date(messages, date(2024, 5, 1))

    assert [m.text for m in selected] == ["時刻あり"]


def test_no_match_returns_empty_list(multi_day_messages):
    """該当なしは空リスト"""
    assert select_for_date(multi_day_messages, date(2024, 6, 1)) == []


def test_timezone_basis_shifts_day_boundaries():
    """基準タイムゾーンで日付境界が決まる"""
    jst = timezone(timedelta(hours=9))
    message = Message(text="深夜", is_user=True, timestamp=utc(2024, 4, 30, 16, 0))

    assert select_for_date([message], date(2024, 5, 1), jst) == [message]
    assert select_for_date([message], date(2024, 5, 1)) == []


def test_naive_timestamps_use_basis_timezone():
    """naiveなタイムスタンプは基準タイムゾーンの時刻とみなす"""
    message = Message(text="naive", is_user=True, timestamp=datetime(2024, 5, 1, 23, 30))

    assert select_for_date([message], date(2024, 5, 1)) == [message]


def test_day_bounds():
    start, end = day_bounds(date(2024, 2, 28), timezone.utc)

    assert start == utc(2024, 2, 28)
    assert end == utc(2024, 2, 29)


def test_resolve_timezone_defaults_to_utc():
    assert resolve_timezone(None) is timezone.utc
    assert resolve_timezone("utc") is timezone.utc


class TestParseTimestamp:
    """ISO8601タイムスタンプの変換"""

    def test_zulu_suffix(self):
        assert parse_timestamp("2024-05-01T10:00:00Z") == utc(2024, 5, 1, 10)

    def test_milliseconds(self):
        parsed = parse_timestamp("2024-05-01T10:00:00.123Z")
        assert parsed.replace(microsecond=0) == utc(2024, 5, 1, 10)

    def test_offset(self):
        parsed = parse_timestamp("2024-05-01T19:00:00+09:00")
        assert parsed == utc(2024, 5, 1, 10)

    def test_invalid_values(self):
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None
        assert parse_timestamp("昨日") is None
        assert parse_timestamp(12345) is None
