"""
デモモード用の応答テーブル

APIキー未設定でも会話を試せるよう、最後のユーザー発言に含まれる
キーワードで話題を分類し、定型文からランダムに1つ返す。
ルールは上から順に評価し、どれにも当たらなければ汎用応答を使う。
"""

import random
from typing import List, Optional, Sequence, Tuple

# (キーワード, 応答候補) の優先順リスト
DEMO_RESPONSE_RULES: List[Tuple[Tuple[str, ...], Tuple[str, ...]]] = [
    (
        ("おはよう", "朝"),
        (
            "おはようございます！今日も素敵な一日にしましょう。どんな予定がありますか？",
            "おはようございます！朝の気分はいかがですか？今日の予定を聞かせてください。",
        ),
    ),
    (
        ("疲れ", "大変"),
        (
            "お疲れ様です。大変だったんですね。詳しく聞かせてもらえますか？",
            "疲れているようですね。今日は何か特別なことがあったのでしょうか？",
        ),
    ),
    (
        ("楽し", "嬉し"),
        (
            "それは素晴らしいですね！どんな楽しいことがあったのか詳しく教えてください。",
            "嬉しそうですね！その気持ちをもっと聞かせてください。",
        ),
    ),
    (
        ("食べ", "料理", "ランチ", "夕食"),
        (
            "おいしそうですね！どんなお食事でしたか？味はいかがでしたか？",
            "食事のお話ですね。誰と一緒に食べましたか？",
        ),
    ),
    (
        ("仕事", "会社"),
        (
            "お仕事はいかがでしたか？今日は順調に進みましたか？",
            "職場でのことですね。同僚の方々とのコミュニケーションはうまくいっていますか？",
        ),
    ),
]

GENERIC_RESPONSES: Tuple[str, ...] = (
    "なるほど、興味深いお話ですね。もう少し詳しく聞かせていただけますか？",
    "そうなんですね！その時の気持ちはどうでしたか？",
    "それはどんな体験でしたか？もう少し教えてください。",
    "興味深いですね。その後はどうなりましたか？",
    "そのお話、もっと詳しく聞きたいです。どんな気分でしたか？",
)


def candidates_for(text: str) -> Sequence[str]:
    """発言内容に対応する応答候補を返す"""
    lowered = text.lower()
    for keywords, responses in DEMO_RESPONSE_RULES:
        if any(keyword in lowered for keyword in keywords):
            return responses
    return GENERIC_RESPONSES


def pick_demo_response(text: str, rng: Optional[random.Random] = None) -> str:
    """発言内容に合う定型応答を1つ選ぶ"""
    chooser = rng or random
    return chooser.choice(candidates_for(text))
