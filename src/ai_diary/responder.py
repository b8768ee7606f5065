"""
チャット応答モジュール

設計ドキュメント参照: doc/design/chat.md
関連クラス:
  - credentials.CredentialResolver: APIキー/モデルの解決
  - openai_client.OpenAIClient: OpenAI API通信
  - demo_responses: APIキー未設定時の定型応答

応答は常に文字列で返し、呼び出し側に例外を投げない。
  1. APIキーが利用可能 → OpenAIで生成
  2. 利用不可 → キーワードに応じたデモ応答
  3. API呼び出し失敗 → ステータスに応じたエラーメッセージ
"""

import logging
import random
from typing import Dict, List, Optional, Sequence

from src.chat_history import Message, UserProfile

from .config import ChatConfig
from .credentials import CredentialResolver
from .demo_responses import pick_demo_response
from .openai_client import OpenAIClient, ProviderError

EMPTY_RESPONSE_MESSAGE = "すみません、応答を生成できませんでした。"
RATE_LIMIT_MESSAGE = "API利用制限に達しました。少し時間をおいてから再試行してください。"
AUTH_FAILED_MESSAGE = "API認証に失敗しました。設定を確認してください。"
GENERIC_ERROR_MESSAGE = "AI応答の生成中にエラーが発生しました。後ほど再試行してください。"


def build_chat_system_prompt(profile: Optional[UserProfile] = None) -> str:
    """チャット用システムプロンプトを構築"""
    prompt = "あなたは親しみやすく、理解力があり、建設的なAIアシスタントです。"

    if profile and profile.name:
        prompt += f"ユーザーの名前は{profile.name}です。"
    if profile and profile.personality:
        prompt += f"ユーザーの好みに合わせて、{profile.personality}な対応を心がけてください。"

    prompt += """
日常会話を通じて、ユーザーの一日の出来事や気持ちを聞き出してください。
回答は日本語で、自然で親しみやすい口調で行ってください。
ユーザーが困っていることがあれば、優しくサポートしてください。
日記を作成するのに役立つような質問も適度に織り交ぜてください。"""
    return prompt


def error_message_for(error: Exception) -> str:
    """API呼び出し失敗をユーザー向けメッセージに変換"""
    status = getattr(error, "status_code", None)
    if status == 429:
        return RATE_LIMIT_MESSAGE
    if status == 401:
        return AUTH_FAILED_MESSAGE
    return GENERIC_ERROR_MESSAGE


class ChatResponder:
    """会話履歴から次のAI応答を1つ生成する"""

    def __init__(
        self,
        resolver: CredentialResolver,
        openai_client: Optional[OpenAIClient] = None,
        config: Optional[ChatConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        初期化

        Args:
            resolver: APIキー/モデルの解決器
            openai_client: OpenAIクライアント（テスト用にDI可能）
            config: チャット設定
            rng: デモ応答の選択に使う乱数生成器（テスト用にDI可能）
        """
        self.resolver = resolver
        self.openai_client = openai_client or OpenAIClient()
        self.config = config or ChatConfig()
        self.rng = rng
        self.logger = logging.getLogger(__name__)

    def respond(
        self,
        history: Sequence[Message],
        profile: Optional[UserProfile] = None,
        explicit_key: Optional[str] = None,
        explicit_model: Optional[str] = None,
    ) -> str:
        """
        会話履歴に対するAI応答を生成

        Args:
            history: 会話履歴（末尾が最新のユーザー発言）
            profile: ユーザープロフィール
            explicit_key: リクエストで指定されたAPIキー
            explicit_model: リクエストで指定されたモデル

        Returns:
            応答テキスト（空文字列にはならない）
        """
        # 上書き値は1回だけ読み、判定と呼び出しで同じ値を使う
        credentials = self.resolver.resolve(explicit_key, explicit_model)
        if not credentials.available:
            self.logger.info("Demo mode: generating sample chat response")
            return self._demo_response(history)

        messages = self._build_messages(history, profile)

        try:
            content = self.openai_client.chat(
                messages,
                credentials,
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except ProviderError as e:
            self.logger.error(f"Chat generation failed: {e}")
            return error_message_for(e)
        except Exception as e:
            self.logger.exception(f"Unexpected chat generation error: {e}")
            return GENERIC_ERROR_MESSAGE

        if not content.strip():
            self.logger.warning("OpenAI returned an empty chat response")
            return EMPTY_RESPONSE_MESSAGE
        return content

    def _build_messages(
        self, history: Sequence[Message], profile: Optional[UserProfile]
    ) -> List[Dict[str, str]]:
        messages = [{"role": "system", "content": build_chat_system_prompt(profile)}]
        messages.extend({"role": msg.role, "content": msg.text} for msg in history)
        return messages

    def _demo_response(self, history: Sequence[Message]) -> str:
        last_user_text = next(
            (msg.text for msg in reversed(history) if msg.is_user and msg.text), ""
        )
        return pick_demo_response(last_user_text, self.rng)
