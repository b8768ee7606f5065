"""
ロギング設定モジュール

設計ドキュメント参照: doc/design/logging.md
"""

import logging
from pathlib import Path
from typing import Optional


def setup_logger(log_level: str = "INFO", log_file: str = "logs/ai_diary.log") -> None:
    """
    ロガーのセットアップ

    Args:
        log_level: ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: ログファイルのパス
    """
    # ログディレクトリの作成
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    # ロガーの設定
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(log_file, encoding="utf-8"),
            logging.StreamHandler(),
        ],
    )


def mask_api_key(api_key: Optional[str]) -> str:
    """ログ出力用にAPIキーを先頭数文字だけ残して伏せる"""
    if not api_key:
        return "<none>"
    return f"{api_key[:6]}..."
