"""共通フィクスチャ"""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from src.ai_diary.credentials import CredentialOverride, CredentialStore
from src.chat_history import Message


def make_completion(content):
    """SDKのChatCompletion相当のオブジェクトを作成"""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
    )


class FakeOpenAISDK:
    """openai.OpenAI の代わりに使う最小限のフェイク

    outcomes には応答テキストまたは送出する例外を順番に積む。
    """

    def __init__(self, outcomes=None, model_ids=None):
        self.outcomes = list(outcomes or [])
        self.model_ids = model_ids or []
        self.calls = []
        self.api_keys = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))
        self.models = SimpleNamespace(list=self._list_models)

    def factory(self, api_key):
        self.api_keys.append(api_key)
        return self

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0) if self.outcomes else ""
        if isinstance(outcome, Exception):
            raise outcome
        return make_completion(outcome)

    def _list_models(self):
        return SimpleNamespace(data=[SimpleNamespace(id=model_id) for model_id in self.model_ids])


class ClearedAfterFirstReadStore(CredentialStore):
    """最初のget()だけ上書き値を返し、以降は別スレッドで消去された状態を返す"""

    def __init__(self, api_key):
        super().__init__()
        self.reads = 0
        self._first = CredentialOverride(api_key=api_key)

    def get(self):
        self.reads += 1
        return self._first if self.reads == 1 else CredentialOverride()


def utc(year, month, day, hour=0, minute=0, second=0):
    return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)


@pytest.fixture
def multi_day_messages():
    """3日間にまたがる会話ログ"""
    return [
        Message(text="昨日はカレーを作った", is_user=True, timestamp=utc(2024, 4, 30, 23, 59, 59)),
        Message(text="おいしそうですね", is_user=False, timestamp=utc(2024, 4, 30, 23, 59, 59)),
        Message(text="今日は公園に行った", is_user=True, timestamp=utc(2024, 5, 1, 10, 0, 0)),
        Message(text="楽しそうですね", is_user=False, timestamp=utc(2024, 5, 1, 10, 0, 5)),
        Message(text="明日は雨らしい", is_user=True, timestamp=utc(2024, 5, 2, 0, 0, 0)),
    ]


@pytest.fixture
def make_client(tmp_path, monkeypatch):
    """依存オブジェクトをリセットしたTestClientを作成する"""
    from fastapi.testclient import TestClient

    from src.ai_diary.openai_client import OpenAIClient
    from src.server import dependencies
    from src.server.app import create_app, reset_dependencies

    def _make(api_key=None, sdk=None, environment="production"):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        monkeypatch.delenv("OPENAI_MODEL", raising=False)
        if api_key:
            monkeypatch.setenv("OPENAI_API_KEY", api_key)
        monkeypatch.setenv("AI_DIARY_ENV", environment)
        monkeypatch.setenv("LOG_FILE", str(tmp_path / "test.log"))
        reset_dependencies()
        if sdk is not None:
            monkeypatch.setattr(
                dependencies,
                "OpenAIClient",
                lambda **kwargs: OpenAIClient(
                    client_factory=sdk.factory, sleep=lambda s: None, **kwargs
                ),
            )
        return TestClient(create_app())

    yield _make
    reset_dependencies()
