"""CredentialResolverのテスト"""

import threading

import pytest

from src.ai_diary.config import DEFAULT_MODEL
from src.ai_diary.credentials import (
    CredentialResolver,
    CredentialStore,
    Credentials,
    TEST_API_KEY,
    is_valid_api_key,
)


@pytest.fixture
def resolver():
    """環境デフォルトとセッション上書きが両方設定された解決器"""
    resolver = CredentialResolver(default_api_key="sk-env", default_model="env-model")
    resolver.configure("sk-session", "session-model")
    return resolver


def test_explicit_key_wins(resolver):
    """明示値 > セッション上書き > 環境デフォルト"""
    assert resolver.resolve("sk-explicit", "explicit-model") == Credentials(
        api_key="sk-explicit", model="explicit-model"
    )


def test_falls_through_to_session_override(resolver):
    assert resolver.resolve() == Credentials(api_key="sk-session", model="session-model")


def test_falls_through_to_environment_default(resolver):
    resolver.reset()

    assert resolver.resolve() == Credentials(api_key="sk-env", model="env-model")


def test_model_falls_back_to_literal_default():
    resolver = CredentialResolver()

    credentials = resolver.resolve()

    assert credentials.api_key is None
    assert credentials.model == DEFAULT_MODEL == "gpt-4o-mini"


def test_override_without_model_keeps_default_model():
    resolver = CredentialResolver(default_api_key="sk-env", default_model="env-model")
    resolver.configure("sk-session")

    assert resolver.resolve() == Credentials(api_key="sk-session", model="env-model")


@pytest.mark.parametrize(
    "api_key, expected",
    [
        (None, False),
        ("", False),
        (TEST_API_KEY, False),
        ("pk-not-openai", False),
        ("sk-valid", True),
    ],
)
def test_is_valid_api_key(api_key, expected):
    """未設定・テスト用キー・形式不正はいずれも利用不可"""
    assert is_valid_api_key(api_key) is expected


def test_is_available_uses_resolved_key():
    resolver = CredentialResolver(default_api_key=TEST_API_KEY)

    assert resolver.is_available() is False
    assert resolver.is_available("sk-explicit") is True


def test_resolved_credentials_report_availability():
    resolver = CredentialResolver(default_api_key=TEST_API_KEY)

    assert resolver.resolve().available is False
    assert resolver.resolve("sk-explicit").available is True


def test_store_replaces_override_atomically():
    """並行して上書きしても、キーとモデルの組が混ざらない"""
    store = CredentialStore()
    pairs = [(f"sk-{i}", f"model-{i}") for i in range(20)]

    threads = [threading.Thread(target=store.set, args=pair) for pair in pairs]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    override = store.get()
    assert (override.api_key, override.model) in pairs


def test_store_clear():
    store = CredentialStore()
    store.set("sk-session", "model")

    store.clear()

    assert store.get().api_key is None
    assert store.get().model is None
