"""
外部API呼び出しのリトライ制御

OpenAIへの送信箇所だけを包む。チャット応答・日記生成のロジック側は
リトライを持たない。
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """最大試行回数と指数バックオフの設定"""

    max_attempts: int = 3
    base_delay: float = 1.0
    backoff_factor: float = 2.0

    def delay_for(self, attempt: int) -> float:
        """attempt回目（1始まり）の失敗後に待つ秒数"""
        return self.base_delay * (self.backoff_factor ** (attempt - 1))


def call_with_retry(
    func: Callable[[], T],
    policy: RetryPolicy,
    is_retryable: Callable[[Exception], bool],
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    funcを実行し、一時的な失敗なら待機して再試行する

    Args:
        func: 引数なしで呼び出す処理
        policy: リトライ設定
        is_retryable: 例外が再試行対象かを判定する関数
        sleep: 待機関数（テスト用にDI可能）

    Returns:
        funcの戻り値

    Raises:
        最後の試行で発生した例外、または再試行対象外の例外
    """
    attempts = max(1, policy.max_attempts)
    for attempt in range(1, attempts + 1):
        try:
            return func()
        except Exception as e:
            if attempt >= attempts or not is_retryable(e):
                raise
            delay = policy.delay_for(attempt)
            logger.warning(
                f"Transient failure (attempt {attempt}/{attempts}), retrying in {delay:.1f}s: {e}"
            )
            sleep(delay)
    raise RuntimeError("unreachable")  # pragma: no cover
