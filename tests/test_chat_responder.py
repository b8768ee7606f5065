"""ChatResponderのテスト"""

import random
from unittest.mock import MagicMock

import pytest

from src.ai_diary.config import ChatConfig
from src.ai_diary.credentials import CredentialResolver, Credentials
from src.ai_diary.demo_responses import GENERIC_RESPONSES, DEMO_RESPONSE_RULES, candidates_for
from src.ai_diary.openai_client import ProviderError
from src.ai_diary.responder import (
    AUTH_FAILED_MESSAGE,
    EMPTY_RESPONSE_MESSAGE,
    GENERIC_ERROR_MESSAGE,
    RATE_LIMIT_MESSAGE,
    ChatResponder,
    build_chat_system_prompt,
)
from src.chat_history import Message, UserProfile

from conftest import ClearedAfterFirstReadStore


@pytest.fixture
def mock_openai_client():
    """OpenAIClientのモック"""
    return MagicMock()


@pytest.fixture
def history():
    return [
        Message(text="こんにちは", is_user=True),
        Message(text="こんにちは！今日はどんな一日でしたか？", is_user=False),
        Message(text="公園に行きました", is_user=True),
    ]


class TestLiveResponses:
    """APIキーが利用可能な場合"""

    @pytest.fixture
    def responder(self, mock_openai_client):
        resolver = CredentialResolver(default_api_key="sk-live", default_model="gpt-4o-mini")
        return ChatResponder(resolver, mock_openai_client, ChatConfig())

    def test_returns_model_text(self, responder, mock_openai_client, history):
        mock_openai_client.chat.return_value = "公園はいかがでしたか？"

        reply = responder.respond(history, UserProfile(name="太郎"))

        assert reply == "公園はいかがでしたか？"
        messages, credentials = mock_openai_client.chat.call_args.args
        assert credentials == Credentials(api_key="sk-live", model="gpt-4o-mini")
        assert messages[0]["role"] == "system"
        assert "太郎" in messages[0]["content"]
        assert [m["role"] for m in messages[1:]] == ["user", "assistant", "user"]
        assert messages[-1]["content"] == "公園に行きました"
        assert mock_openai_client.chat.call_args.kwargs["temperature"] == 0.7

    def test_explicit_credentials_are_forwarded(self, responder, mock_openai_client, history):
        mock_openai_client.chat.return_value = "了解です"

        responder.respond(history, explicit_key="sk-request", explicit_model="gpt-4o")

        credentials = mock_openai_client.chat.call_args.args[1]
        assert credentials == Credentials(api_key="sk-request", model="gpt-4o")

    def test_empty_model_output(self, responder, mock_openai_client, history):
        mock_openai_client.chat.return_value = "   "

        assert responder.respond(history) == EMPTY_RESPONSE_MESSAGE

    @pytest.mark.parametrize(
        "status, expected",
        [
            (429, RATE_LIMIT_MESSAGE),
            (401, AUTH_FAILED_MESSAGE),
            (500, GENERIC_ERROR_MESSAGE),
            (504, GENERIC_ERROR_MESSAGE),
        ],
    )
    def test_provider_errors_map_to_messages(
        self, responder, mock_openai_client, history, status, expected
    ):
        mock_openai_client.chat.side_effect = ProviderError(status_code=status, message="boom")

        assert responder.respond(history) == expected

    def test_unexpected_error_never_escapes(self, responder, mock_openai_client, history):
        mock_openai_client.chat.side_effect = RuntimeError("unexpected")

        assert responder.respond(history) == GENERIC_ERROR_MESSAGE


class TestDemoResponses:
    """APIキーが利用できない場合"""

    @pytest.fixture
    def responder(self, mock_openai_client):
        resolver = CredentialResolver(default_api_key=None)
        return ChatResponder(resolver, mock_openai_client, rng=random.Random(0))

    @pytest.mark.parametrize(
        "text, bucket_index",
        [
            ("おはよう！", 0),
            ("今日は疲れた", 1),
            ("楽しかった", 2),
            ("ランチにパスタを食べた", 3),
            ("会社で会議があった", 4),
        ],
    )
    def test_keyword_buckets(self, responder, mock_openai_client, text, bucket_index):
        reply = responder.respond([Message(text=text, is_user=True)])

        assert reply in DEMO_RESPONSE_RULES[bucket_index][1]
        mock_openai_client.chat.assert_not_called()

    def test_generic_fallback(self, responder):
        reply = responder.respond([Message(text="特に何もない", is_user=True)])

        assert reply in GENERIC_RESPONSES

    def test_uses_last_user_message(self, responder):
        history = [
            Message(text="仕事が大変だった", is_user=True),
            Message(text="おはようございます", is_user=False),
        ]

        reply = responder.respond(history)

        assert reply in DEMO_RESPONSE_RULES[1][1]

    def test_empty_history(self, responder):
        assert responder.respond([]) in GENERIC_RESPONSES

    def test_test_api_key_is_demo(self, mock_openai_client):
        responder = ChatResponder(CredentialResolver(default_api_key="test-api-key"), mock_openai_client)

        responder.respond([Message(text="こんにちは", is_user=True)])

        mock_openai_client.chat.assert_not_called()


def test_rule_priority_is_ordered():
    """複数の話題に当たる場合は先のルールが優先される"""
    assert candidates_for("朝から仕事") == DEMO_RESPONSE_RULES[0][1]


def test_system_prompt_includes_personality():
    prompt = build_chat_system_prompt(UserProfile(name="花子", personality="明るく元気"))

    assert "ユーザーの名前は花子です。" in prompt
    assert "明るく元気な対応" in prompt
    assert "日記" in prompt


def test_system_prompt_without_profile():
    prompt = build_chat_system_prompt(None)

    assert "ユーザーの名前" not in prompt


def test_session_key_is_read_once_per_reply(mock_openai_client, history):
    """判定後に上書き値が消えても、判定に使ったキーで呼び出す"""
    store = ClearedAfterFirstReadStore("sk-session")
    mock_openai_client.chat.return_value = "楽しそうですね！"
    responder = ChatResponder(CredentialResolver(store=store), mock_openai_client)

    reply = responder.respond(history)

    assert reply == "楽しそうですね！"
    assert store.reads == 1
    assert mock_openai_client.chat.call_args.args[1].api_key == "sk-session"
