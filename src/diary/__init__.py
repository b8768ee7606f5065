"""
Diary module for turning a day's chat history into a diary entry.

This module provides functionality for:
- Date-scoped transcript extraction
- Strict single-day diary prompts
- Defensive parsing of the model's JSON output
"""

from src.diary.models import (
    DiaryError,
    DiaryErrorKind,
    DiaryMood,
    DiaryRecord,
    DiaryResult,
    parse_target_date,
)
from src.diary.synthesizer import DiarySynthesizer

__all__ = [
    "DiaryError",
    "DiaryErrorKind",
    "DiaryMood",
    "DiaryRecord",
    "DiaryResult",
    "DiarySynthesizer",
    "parse_target_date",
]
