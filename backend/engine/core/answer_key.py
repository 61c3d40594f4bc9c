# core/answer_key.py
from __future__ import annotations

import logging
import re
from typing import Dict, Iterable

logger = logging.getLogger(__name__)

MIN_KEY = 1
MAX_KEY = 500

_KEY_LINE_RE = re.compile(r"^\s*(\d{1,3})(?:\s?[.)]\s*|\s+|\s?[-–]\s?)(?P<token>\S.*?)\s*$")

# "1-А 2-Б 3-В" / "1А 2Б" / "1 - А"
_PAIR_RE = re.compile(r"(\d)\s*[-–—.:)]?\s*([A-Za-zА-Яа-яІіЇїЄєҐґ])")
_NUMERIC_RE = re.compile(r"^-?\d+(?:[.,]\d+)?$")
# "1,4,6" / "1 4 6" / "1;4;6"
_DIGIT_LIST_RE = re.compile(r"^\d(?:\s*[,;\s]\s*\d){2,}$")
_NON_LETTER_RE = re.compile(r"[^A-Za-zА-Яа-яІіЇїЄєҐґ]")


def normalize_token(token: str) -> str:
    """
    Raw key token -> canonical form:
      - >= 2 digit-letter pairs: letters ordered by their digit ("3-В 1-А 2-Б" -> "АБВ")
      - number (written answer): kept verbatim
      - digit list: digits only ("1, 4, 6" -> "146")
      - otherwise: letters only, upper-cased
    """
    t = (token or "").strip()
    pairs = _PAIR_RE.findall(t)
    if len(pairs) >= 2:
        pairs.sort(key=lambda p: int(p[0]))
        return "".join(letter for _, letter in pairs).upper()
    if _NUMERIC_RE.match(t):
        return t
    if _DIGIT_LIST_RE.match(t):
        return re.sub(r"\D", "", t)
    return _NON_LETTER_RE.sub("", t).upper()


def parse_answer_key(lines: Iterable[str]) -> Dict[int, str]:
    """Key lines -> {question_number: token}. Unparsable lines are skipped; last occurrence wins."""
    key_map: Dict[int, str] = {}
    skipped = 0
    for line in lines:
        m = _KEY_LINE_RE.match(line or "")
        if not m:
            skipped += 1
            continue
        number = int(m.group(1))
        if not (MIN_KEY <= number <= MAX_KEY):
            skipped += 1
            continue
        key_map[number] = normalize_token(m.group("token"))

    logger.debug(f"answer key: entries={len(key_map)} skipped={skipped}")
    return key_map
