"""
OpenAI APIクライアントモジュール

設計ドキュメント参照: doc/design/openai_integration.md
関連クラス:
  - credentials.Credentials: 呼び出しごとのAPIキー/モデル
  - retry.RetryPolicy: 一時的な失敗時の再試行
  - responder.ChatResponder / diary.synthesizer.DiarySynthesizer: このクライアントを使用

注意: APIキーはインスタンスに保持せず、呼び出しごとに Credentials で受け取る
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from openai import (
    APIError,
    APIStatusError,
    APITimeoutError,
    OpenAI,
    RateLimitError,
)

from .credentials import Credentials
from .retry import RetryPolicy, call_with_retry

# 再試行しても結果が変わらないステータス
NON_RETRYABLE_STATUS = {400, 401, 403, 404, 422}


@dataclass
class ProviderError(Exception):
    """OpenAI呼び出しの失敗をステータスコード付きで表す"""

    status_code: int
    message: str

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.message}"


def is_transient(error: Exception) -> bool:
    """レート制限・サーバーエラー・通信失敗のみ再試行対象"""
    if isinstance(error, ProviderError):
        return error.status_code not in NON_RETRYABLE_STATUS
    return False


class OpenAIClient:
    """OpenAI Chat Completions APIクライアント"""

    def __init__(
        self,
        timeout_seconds: float = 10.0,
        retry_policy: Optional[RetryPolicy] = None,
        client_factory: Optional[Callable[[str], Any]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        初期化

        Args:
            timeout_seconds: 1リクエストあたりのタイムアウト（秒）
            retry_policy: 一時的な失敗時のリトライ設定
            client_factory: APIキーからSDKクライアントを生成する関数（テスト用にDI可能）
            sleep: リトライ待機関数（テスト用にDI可能）
        """
        self.timeout_seconds = timeout_seconds
        self.retry_policy = retry_policy or RetryPolicy()
        self.client_factory = client_factory or self._default_factory
        self.sleep = sleep
        self.logger = logging.getLogger(__name__)

    def _default_factory(self, api_key: str) -> OpenAI:
        # リトライはこちらで制御するためSDK側は無効化
        return OpenAI(api_key=api_key, timeout=self.timeout_seconds, max_retries=0)

    def chat(
        self,
        messages: List[Dict[str, str]],
        credentials: Credentials,
        temperature: float = 0.7,
        max_tokens: int = 1000,
        json_mode: bool = False,
    ) -> str:
        """
        チャット形式で生成

        Args:
            messages: メッセージのリスト [{"role": "user", "content": "..."}]
            credentials: 使用するAPIキー/モデル
            temperature: 生成温度
            max_tokens: 最大トークン数
            json_mode: JSONオブジェクト形式での出力を要求するか

        Returns:
            生成されたテキスト（応答が空の場合は空文字列）

        Raises:
            ProviderError: API呼び出しに失敗した場合
        """
        payload: Dict[str, Any] = {
            "model": credentials.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        client = self.client_factory(credentials.api_key)

        def _send() -> Any:
            return self._call(lambda: client.chat.completions.create(**payload))

        response = call_with_retry(_send, self.retry_policy, is_transient, sleep=self.sleep)
        return self._extract_content(response)

    def list_models(self, credentials: Credentials) -> List[str]:
        """
        利用可能なモデルIDのリストを取得

        Raises:
            ProviderError: API呼び出しに失敗した場合
        """
        client = self.client_factory(credentials.api_key)
        models = self._call(client.models.list)
        return [model.id for model in models.data]

    def _call(self, func: Callable[[], Any]) -> Any:
        """SDK例外を ProviderError に変換して呼び出す"""
        try:
            return func()
        except APITimeoutError as e:
            self.logger.error(f"OpenAI timeout: {e}")
            raise ProviderError(status_code=504, message=str(e)) from e
        except RateLimitError as e:
            self.logger.error(f"OpenAI rate limit: {e}")
            raise ProviderError(status_code=429, message=str(e)) from e
        except APIStatusError as e:
            self.logger.error(f"OpenAI status error ({e.status_code}): {e}")
            raise ProviderError(status_code=e.status_code or 502, message=str(e)) from e
        except APIError as e:
            self.logger.error(f"OpenAI API error: {e}")
            raise ProviderError(status_code=502, message=str(e)) from e

    @staticmethod
    def _extract_content(response: Any) -> str:
        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        message = getattr(choices[0], "message", None)
        return getattr(message, "content", None) or ""
