# core/hints.py
from __future__ import annotations

import re

# =========================
# Prompt hint phrases (uk + en)
# =========================

MATCHING_HINT_RE = re.compile(
    r"(Установіть\s+відповідність|match\s+(?:each|the\s+following))",
    re.IGNORECASE,
)

SEQUENCE_HINT_RE = re.compile(
    r"(Установіть\s+(?:послідовність|хронологію)|"
    r"у\s*хронологічній\s*послідовності|"
    r"розташуйте\s+в\s+(?:хронологічній|правильній)\s+послідовності|"
    r"in\s+chronological\s+order|arrange\s+.{0,40}?\bin\s+(?:the\s+)?(?:correct\s+)?order)",
    re.IGNORECASE,
)

SELECT_THREE_HINT_RE = re.compile(
    r"(виберіть\s+три|три\s+правильні|choose\s+three|select\s+three)",
    re.IGNORECASE,
)

# "Варіанти відповідей до завдань 1–5", "Options for questions 1-5"
SHARED_OPTIONS_HINT_RE = re.compile(
    r"^(?:варіанти\s+відповідей\s+до\s+завдань|options\s+for\s+questions)\b",
    re.IGNORECASE,
)
HINT_RANGE_RE = re.compile(r"(\d{1,3})\s*[-–—]\s*(\d{1,3})")
