"""
設定管理モジュール

設計ドキュメント参照: doc/design/configuration.md
関連クラス:
  - credentials.CredentialResolver: デフォルトのAPIキー/モデルを使用
  - openai_client.OpenAIClient: タイムアウト・リトライ設定を使用
  - diary.synthesizer.DiarySynthesizer: 日記生成設定を使用
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULT_MODEL = "gpt-4o-mini"


@dataclass
class OpenAIConfig:
    """OpenAI API設定"""

    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    timeout_seconds: float = 10.0
    max_retries: int = 2
    retry_backoff_seconds: float = 1.0


@dataclass
class ChatConfig:
    """チャット応答設定"""

    max_message_length: int = 2000
    history_window: int = 10  # 最新10件のみ送信
    temperature: float = 0.7
    max_tokens: int = 1000


@dataclass
class DiaryConfig:
    """日記生成設定"""

    temperature: float = 0.3
    max_tokens: int = 1500
    timezone: str = "UTC"


@dataclass
class Config:
    """アプリケーション設定クラス"""

    # OpenAI設定
    openai: OpenAIConfig = None  # type: ignore

    # チャット設定
    chat: ChatConfig = None  # type: ignore

    # 日記設定
    diary: DiaryConfig = None  # type: ignore

    # ログ設定
    log_level: str = "INFO"
    log_file: str = "logs/ai_diary.log"

    # 実行環境（development の場合のみエラー詳細を返す）
    environment: str = "production"

    def __post_init__(self):
        """デフォルト値の初期化"""
        if self.openai is None:
            self.openai = OpenAIConfig()
        if self.chat is None:
            self.chat = ChatConfig()
        if self.diary is None:
            self.diary = DiaryConfig()

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "Config":
        """YAMLファイルから設定を読み込む

        APIキーはYAMLには置かず、常に環境変数 OPENAI_API_KEY から取得する。

        Args:
            config_path: 設定ファイルパス（省略時は AI_DIARY_CONFIG または config/app_config.yaml）

        Returns:
            Config: 設定インスタンス
        """
        if config_path is None:
            env_path = os.getenv("AI_DIARY_CONFIG")
            if env_path:
                config_path = Path(env_path)
            else:
                project_root = Path(__file__).parent.parent.parent
                config_path = project_root / "config" / "app_config.yaml"

        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data: Dict[str, Any] = yaml.safe_load(f) or {}

        # YAML構造から設定を抽出
        openai_data = yaml_data.get("openai", {})
        chat_data = yaml_data.get("chat", {})
        diary_data = yaml_data.get("diary", {})
        log_data = yaml_data.get("log", {})

        return cls(
            openai=OpenAIConfig(
                api_key=os.getenv("OPENAI_API_KEY"),
                model=os.getenv("OPENAI_MODEL") or openai_data.get("model", DEFAULT_MODEL),
                timeout_seconds=float(openai_data.get("timeout_seconds", 10.0)),
                max_retries=int(openai_data.get("max_retries", 2)),
                retry_backoff_seconds=float(openai_data.get("retry_backoff_seconds", 1.0)),
            ),
            chat=ChatConfig(
                max_message_length=chat_data.get("max_message_length", 2000),
                history_window=chat_data.get("history_window", 10),
                temperature=chat_data.get("temperature", 0.7),
                max_tokens=chat_data.get("max_tokens", 1000),
            ),
            diary=DiaryConfig(
                temperature=diary_data.get("temperature", 0.3),
                max_tokens=diary_data.get("max_tokens", 1500),
                timezone=os.getenv("AI_DIARY_TIMEZONE") or diary_data.get("timezone", "UTC"),
            ),
            log_level=os.getenv("LOG_LEVEL") or log_data.get("level", "INFO"),
            log_file=os.getenv("LOG_FILE") or log_data.get("file", "logs/ai_diary.log"),
            environment=os.getenv("AI_DIARY_ENV") or yaml_data.get("environment", "production"),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """環境変数のみから設定を読み込む"""
        return cls(
            openai=OpenAIConfig(
                api_key=os.getenv("OPENAI_API_KEY"),
                model=os.getenv("OPENAI_MODEL", DEFAULT_MODEL),
                timeout_seconds=float(os.getenv("OPENAI_TIMEOUT_SECONDS", "10")),
                max_retries=int(os.getenv("OPENAI_MAX_RETRIES", "2")),
                retry_backoff_seconds=float(os.getenv("OPENAI_RETRY_BACKOFF_SECONDS", "1.0")),
            ),
            chat=ChatConfig(
                max_message_length=int(os.getenv("CHAT_MAX_MESSAGE_LENGTH", "2000")),
                history_window=int(os.getenv("CHAT_HISTORY_WINDOW", "10")),
            ),
            diary=DiaryConfig(
                timezone=os.getenv("AI_DIARY_TIMEZONE", "UTC"),
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", "logs/ai_diary.log"),
            environment=os.getenv("AI_DIARY_ENV", "production"),
        )
