"""
APIキー/モデル解決モジュール

設計ドキュメント参照: doc/design/credentials.md
関連クラス:
  - config.OpenAIConfig: 環境変数由来のデフォルト値
  - responder.ChatResponder / diary.synthesizer.DiarySynthesizer: 解決結果を使用

解決順序（優先度の高い順）:
  1. リクエストで明示的に渡された値
  2. /api/config で設定されたセッション共通の上書き値
  3. 環境変数（OPENAI_API_KEY / OPENAI_MODEL）
  4. モデルのみ固定デフォルト（gpt-4o-mini）

セッション共通の上書き値はプロセス全体で共有される。更新は
ロック下で一括置換されるため値の取り違えは起きないが、複数の
リクエストが同時に上書きした場合は最後の書き込みが勝つ。
"""

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from .config import DEFAULT_MODEL
from .logger import mask_api_key

# テスト用のダミーキー。設定されていても未設定として扱う
TEST_API_KEY = "test-api-key"
API_KEY_PREFIX = "sk-"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    """1回のAPI呼び出しに使う認証情報"""

    api_key: Optional[str]
    model: str

    @property
    def available(self) -> bool:
        """このAPIキーで実際にOpenAIを呼び出せるか"""
        return is_valid_api_key(self.api_key)


@dataclass(frozen=True)
class CredentialOverride:
    """セッション共通の上書き値（未設定の項目はNone）"""

    api_key: Optional[str] = None
    model: Optional[str] = None


def is_valid_api_key(api_key: Optional[str]) -> bool:
    """APIキーが実際の呼び出しに使える形式かを判定

    未設定・テスト用ダミー・プレフィックス不一致はいずれも利用不可。
    """
    if not api_key or api_key == TEST_API_KEY:
        return False
    return api_key.startswith(API_KEY_PREFIX)


class CredentialStore:
    """セッション共通の上書き値を保持するスレッドセーフなセル"""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._override = CredentialOverride()

    def get(self) -> CredentialOverride:
        with self._lock:
            return self._override

    def set(self, api_key: Optional[str], model: Optional[str] = None) -> CredentialOverride:
        """上書き値を一括で置き換える"""
        override = CredentialOverride(api_key=api_key, model=model)
        with self._lock:
            self._override = override
        return override

    def clear(self) -> None:
        with self._lock:
            self._override = CredentialOverride()


class CredentialResolver:
    """リクエスト単位でAPIキーとモデルを決定する"""

    def __init__(
        self,
        default_api_key: Optional[str] = None,
        default_model: Optional[str] = None,
        store: Optional[CredentialStore] = None,
    ):
        """
        初期化

        Args:
            default_api_key: 環境設定のデフォルトAPIキー
            default_model: 環境設定のデフォルトモデル
            store: セッション共通の上書き値（テスト用にDI可能）
        """
        self.default_api_key = default_api_key
        self.default_model = default_model
        self.store = store or CredentialStore()

    def resolve(
        self, explicit_key: Optional[str] = None, explicit_model: Optional[str] = None
    ) -> Credentials:
        """明示値 → 上書き値 → 環境デフォルトの順でAPIキー/モデルを解決"""
        override = self.store.get()
        api_key = explicit_key or override.api_key or self.default_api_key
        model = explicit_model or override.model or self.default_model or DEFAULT_MODEL
        return Credentials(api_key=api_key, model=model)

    def is_available(self, explicit_key: Optional[str] = None) -> bool:
        """解決されたAPIキーでOpenAIを呼び出せるか（副作用なし）"""
        credentials = self.resolve(explicit_key)
        logger.debug(
            "OpenAI availability: %s (key=%s)",
            credentials.available,
            mask_api_key(credentials.api_key),
        )
        return credentials.available

    def configure(self, api_key: str, model: Optional[str] = None) -> CredentialOverride:
        """セッション共通の上書き値を設定"""
        logger.info("Session credentials updated (key=%s, model=%s)", mask_api_key(api_key), model)
        return self.store.set(api_key, model)

    def reset(self) -> None:
        """セッション共通の上書き値を消去"""
        self.store.clear()
