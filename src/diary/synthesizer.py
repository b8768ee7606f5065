"""
DiarySynthesizer: チャット履歴から1日分の日記を生成する

設計方針:
- 対象日のメッセージだけを抽出してからプロンプトを組み立てる
- 対象日のメッセージがなければデモにも切り替えずエラーを返す
- APIキーが使えない場合はデモ用の日記を返す（成功扱い）
- モデル出力はJSONとして読み、欠けた項目はデフォルト値で補う
- 例外は呼び出し側に投げず、常に DiaryResult を返す

関連:
- src/chat_history/date_filter.py: 日付フィルタ
- src/diary/prompts.py: システムプロンプト
- src/diary/payload.py: モデル出力の読み取り
- src/ai_diary/openai_client.py: LLM呼び出し
"""

import logging
import re
from datetime import date, datetime, timezone, tzinfo
from typing import Callable, List, Optional, Sequence, Union

from src.ai_diary.config import DiaryConfig
from src.ai_diary.credentials import CredentialResolver
from src.ai_diary.openai_client import OpenAIClient, ProviderError
from src.chat_history import Message, select_for_date
from src.chat_history.date_filter import localize, resolve_timezone

from .models import DEFAULT_MOOD, DiaryErrorKind, DiaryRecord, DiaryResult, parse_target_date
from .payload import parse_diary_output
from .prompts import build_diary_system_prompt

CONTROL_CHARS = re.compile(r"[\x00-\x1F\x7F-\x9F]")

INVALID_DATE_MESSAGE = "日付はYYYY-MM-DD形式で入力してください。"
EMPTY_CHAT_MESSAGE = "チャット履歴が空です。"
GENERATION_FAILED_MESSAGE = "日記生成中にエラーが発生しました。後ほど再試行してください。"
RATE_LIMIT_MESSAGE = "API利用制限に達しました。少し時間をおいてから再試行してください。"
AUTH_FAILED_MESSAGE = "API認証に失敗しました。設定を確認してください。"

DEMO_CONTENT = (
    "今日はAI日記アプリのテストを行った。チャット機能とカレンダー機能が正常に動作することを確認できた。"
    "OpenAI APIキーを設定すれば、実際のAI機能を使用できるようになる。"
    "アプリのデザインも美しく、使いやすいインターフェースが完成している。"
)
DEMO_TAGS = ["デモ", "AI日記", "テスト"]


def no_messages_message(target_date: str) -> str:
    return f"{target_date}のチャット履歴が見つかりません。まずはその日にAIとチャットしてから日記を生成してください。"


def clean_text(text: Optional[str]) -> str:
    """制御文字を取り除く"""
    return CONTROL_CHARS.sub("", text or "")


class DiarySynthesizer:
    """日付単位の日記生成器"""

    def __init__(
        self,
        resolver: CredentialResolver,
        openai_client: Optional[OpenAIClient] = None,
        config: Optional[DiaryConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        初期化

        Args:
            resolver: APIキー/モデルの解決器
            openai_client: OpenAIクライアント（テスト用にDI可能）
            config: 日記生成設定
            clock: 作成日時の取得関数（テスト用にDI可能）
        """
        self.resolver = resolver
        self.openai_client = openai_client or OpenAIClient()
        self.config = config or DiaryConfig()
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.tz: tzinfo = resolve_timezone(self.config.timezone)
        self.logger = logging.getLogger(__name__)

    def generate(
        self,
        messages: Sequence[Message],
        target_date: Union[str, date],
        explicit_key: Optional[str] = None,
        explicit_model: Optional[str] = None,
    ) -> DiaryResult:
        """
        指定日のチャット履歴から日記を生成

        Args:
            messages: 会話ログ全体（時系列順）
            target_date: 対象日（YYYY-MM-DD、date または datetime）
            explicit_key: リクエストで指定されたAPIキー
            explicit_model: リクエストで指定されたモデル

        Returns:
            DiaryResult（成功時は diary、失敗時は error）
        """
        if isinstance(target_date, datetime):
            day = target_date.date()
        elif isinstance(target_date, date):
            day = target_date
        else:
            try:
                day = parse_target_date(target_date)
            except ValueError:
                return DiaryResult.fail(DiaryErrorKind.INVALID_DATE, INVALID_DATE_MESSAGE)
        date_str = day.isoformat()

        # 1. 対象日のメッセージを抽出
        day_messages = select_for_date(messages, day, self.tz)
        self.logger.info(
            f"Generating diary for {date_str}: {len(day_messages)}/{len(messages)} messages on that day"
        )
        if not day_messages:
            return DiaryResult.fail(
                DiaryErrorKind.NO_MESSAGES_FOR_DATE, no_messages_message(date_str)
            )

        # 2. APIキーが使えなければデモ日記（上書き値はここで1回だけ読む）
        credentials = self.resolver.resolve(explicit_key, explicit_model)
        if not credentials.available:
            self.logger.info("Demo mode: generating sample diary")
            return DiaryResult.ok(self._demo_diary(date_str), demo=True)

        # 3. トランスクリプト化
        chat_content = self.render_transcript(day_messages)
        if not chat_content.strip():
            return DiaryResult.fail(DiaryErrorKind.EMPTY_CHAT_CONTENT, EMPTY_CHAT_MESSAGE)

        # 4-5. プロンプト構築とLLM呼び出し
        prompt = build_diary_system_prompt(date_str, chat_content)
        try:
            output = self.openai_client.chat(
                [{"role": "system", "content": prompt}],
                credentials,
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
                json_mode=True,
            )
        except ProviderError as e:
            self.logger.error(f"Diary generation failed: {e}")
            return DiaryResult.fail(
                DiaryErrorKind.GENERATION_FAILED, self._failure_message(e), detail=e.message
            )
        except Exception as e:
            self.logger.exception(f"Unexpected diary generation error: {e}")
            return DiaryResult.fail(
                DiaryErrorKind.GENERATION_FAILED, GENERATION_FAILED_MESSAGE, detail=str(e)
            )

        # 6. 出力の読み取りとデフォルト補完
        payload = parse_diary_output(output)
        diary = payload.to_record(date_str, self._now())
        return DiaryResult.ok(diary)

    def render_transcript(self, messages: Sequence[Message]) -> str:
        """メッセージを [HH:MM:SS] 話者: 本文 の行に変換（空のメッセージは除外）"""
        lines: List[str] = []
        for message in messages:
            text = clean_text(message.text).strip()
            if not text:
                continue
            time_str = (
                localize(message.timestamp, self.tz).strftime("%H:%M:%S")
                if message.timestamp
                else "--:--:--"
            )
            lines.append(f"[{time_str}] {message.speaker}: {text}")
        return "\n".join(lines)

    def _demo_diary(self, date_str: str) -> DiaryRecord:
        return DiaryRecord(
            title=f"{date_str}の日記（デモ）",
            content=DEMO_CONTENT,
            mood=DEFAULT_MOOD,
            weather=None,
            tags=list(DEMO_TAGS),
            date=date_str,
            created_at=self._now(),
        )

    def _now(self) -> str:
        return self.clock().isoformat()

    @staticmethod
    def _failure_message(error: ProviderError) -> str:
        if error.status_code == 429:
            return RATE_LIMIT_MESSAGE
        if error.status_code == 401:
            return AUTH_FAILED_MESSAGE
        return GENERATION_FAILED_MESSAGE
