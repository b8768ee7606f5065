"""
日記生成プロンプト

会話ログは複数日にまたがることがあるため、対象日以外の内容を
日記に混ぜないよう日付を明示し、出力形式もJSONで固定する。
"""

from .models import MOOD_VALUES


def build_diary_system_prompt(target_date: str, chat_content: str) -> str:
    """
    日記生成用のシステムプロンプトを構築

    Args:
        target_date: 対象日（YYYY-MM-DD）
        chat_content: 対象日のみを含むチャット履歴（[HH:MM:SS] 話者: 本文）

    Returns:
        システムプロンプト文字列
    """
    moods = "/".join(MOOD_VALUES)
    return f"""あなたは日記作成のエキスパートです。以下のチャット履歴を基に、{target_date}の日記を作成してください。

**最重要ルール：**
- 使ってよいのは{target_date}のチャット内容だけです
- {target_date}以外の日の出来事を推測したり、持ち込んだりしないでください
- チャット履歴にない出来事・感情・人物を創作しないでください

**要件:**
1. 日記は一人称で書く
2. チャット履歴に出てきた具体的な出来事をそのまま記載する
3. ユーザーの言葉や感情表現をできる限り保持する
4. 自然な日記の形式に整理する
5. 次のJSON形式のみで返す:
{{"title": "日記タイトル", "content": "日記本文", "mood": "気分({moods}のいずれか)", "weather": "天気(会話に出てきた場合のみ。不明ならnull)", "tags": ["タグ1", "タグ2"]}}

**日付:** {target_date}

**{target_date}のチャット履歴:**
{chat_content}

上記のチャット履歴から、ユーザーが{target_date}に実際に体験したことや話したことだけをベースに日記を作成してください。"""
