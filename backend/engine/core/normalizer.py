# core/normalizer.py
"""
Text normalizer for pasted exam text.

Every rule is a pure str -> str transform; `normalize_text` applies them in order.
Nothing here raises: text that matches no rule stays on its own line.
"""
from __future__ import annotations

import re
from typing import List, Optional

from engine.core.subjects import OPTION_LETTER_CLASS

ANSWERS_SENTINEL = "ВІДПОВІДІ"

# =========================
# Patterns
# =========================

_INVISIBLE_RE = re.compile(r"[\u200b\u200c\u200d\u2060\ufeff]")
_HSPACE_RE = re.compile(r"[ \t\f\v\u00a0\u2000-\u200a\u202f\u205f\u3000]+")

WATERMARK_RE = re.compile(
    r"(Український\s+центр\s+оцінювання\s+якості\s+освіти|УЦОЯО|©|\bcopyright\b|"
    r"zno\.osvita\.ua|testportal\.gov\.ua)",
    re.IGNORECASE,
)

# "... text 12. Next" / "... text Б) next"
_ITEM_SPLIT_RE = re.compile(r"(?<=\S) (?=\d{1,3}[.)] )")
_OPTION_SPLIT_RE = re.compile(rf"(?<=\S) (?=[{OPTION_LETTER_CLASS}][.)] )")
_FIRST_OPTION_RE = re.compile(r"(?:^|\s)[AА][.)] ")
_INITIAL_BEFORE_RE = re.compile(rf"(?:^|\s)[{OPTION_LETTER_CLASS}][.)]$")
# key entries may be glued without a space after the dot: "1.Б 2.А"
_KEY_SPLIT_RE = re.compile(r"(?<=\S) (?=\d{1,3}\s?[.)](?!\d))")
_KEY_ENTRY_START_RE = re.compile(r"^\d{1,3}\s?[.)\-–]")

ITEM_START_RE = re.compile(r"^\d{1,3}[.)]\s")
OPTION_START_RE = re.compile(rf"^[{OPTION_LETTER_CLASS}](?:[.)]|:)\s")

# single digit, operator or bare variable
_MATH_FRAGMENT_RE = re.compile(r"^(?:\d|[+\-−*/=^(){}\[\]∙·×<>≤≥√]|[xXyYzZ𝑥𝑦])$")
_DANGLING_OPERATOR_RE = re.compile(r"[+−*/=^(∙·×]$")

ANSWER_HEADER_RE = re.compile(
    r"^(?:правильні\s+відповіді|ключ(?:\s+відповідей)?|відповіді|answer\s+key|answers|ответы)"
    r"(?=$|[\s:.\-–—]|\d)[\s:.\-–—]*(?P<rest>.*)$",
    re.IGNORECASE,
)


# =========================
# Rules
# =========================

def clean_whitespace(text: str) -> str:
    """Rule 1: line endings, NBSP/zero-width, horizontal runs, trim, blank runs."""
    raw = (text or "").replace("\r\n", "\n").replace("\r", "\n")
    raw = _INVISIBLE_RE.sub("", raw)

    lines = [_HSPACE_RE.sub(" ", line).strip() for line in raw.split("\n")]
    return "\n".join(_collapse_blank_runs(lines))


def _collapse_blank_runs(lines: List[str]) -> List[str]:
    out: List[str] = []
    for line in lines:
        if not line and (not out or not out[-1]):
            continue
        out.append(line)
    while out and not out[-1]:
        out.pop()
    return out


def drop_watermarks(text: str) -> str:
    """Rule 2."""
    kept = [ln for ln in text.split("\n") if not WATERMARK_RE.search(ln)]
    return "\n".join(_collapse_blank_runs(kept))


def _split_inline_options(line: str) -> str:
    # only from the first "А." header on (or a line that already opens an option),
    # and never right after another "X." (initials: Т. Г. Шевченко)
    first = _FIRST_OPTION_RE.search(line)
    if OPTION_START_RE.match(line):
        start = 0
    elif first:
        start = first.start()
    else:
        return line
    pieces: List[str] = []
    last = 0
    for m in _OPTION_SPLIT_RE.finditer(line):
        p = m.start()
        if p < start or _INITIAL_BEFORE_RE.search(line[:p]):
            continue
        pieces.append(line[last:p])
        last = m.end()
    pieces.append(line[last:])
    return "\n".join(pieces)


def split_glued_items(text: str) -> str:
    """Rule 3: break before numbered items / lettered options found mid-line."""
    out: List[str] = []
    for line in text.split("\n"):
        line = _ITEM_SPLIT_RE.sub("\n", line)
        out.extend(_split_inline_options(part) for part in line.split("\n"))
    return "\n".join(out)


def _is_item_start(line: str) -> bool:
    return bool(ITEM_START_RE.match(line) or OPTION_START_RE.match(line))


def _answer_header_rest(line: str) -> Optional[str]:
    """Text after a key header, or None when the line is not a header."""
    m = ANSWER_HEADER_RE.match(line)
    if not m:
        return None
    rest = m.group("rest").strip()
    if rest and not _KEY_ENTRY_START_RE.match(rest):
        return None
    return rest


def rejoin_fragments(text: str) -> str:
    """Rule 4: glue math fragments, dangling operators and hyphen word-wraps."""
    out: List[str] = []
    for line in text.split("\n"):
        prev = out[-1] if out else ""
        if not line or not prev or _is_item_start(line) or _answer_header_rest(line) is not None:
            out.append(line)
            continue
        if _MATH_FRAGMENT_RE.match(line) or _DANGLING_OPERATOR_RE.search(prev):
            out[-1] = f"{prev}{line}"
        elif prev.endswith("-") and len(prev) > 1 and prev[-2].isalpha():
            out[-1] = f"{prev[:-1]}{line}"
        else:
            out.append(line)
    return "\n".join(out)


def mark_answer_key(text: str) -> str:
    """Rule 5: canonical sentinel line, key entries one per line."""
    out: List[str] = []
    in_key = False
    for line in text.split("\n"):
        rest = _answer_header_rest(line)
        if rest is not None:
            out.append(ANSWERS_SENTINEL)
            in_key = True
            line = rest
            if not line:
                continue
        if in_key:
            out.extend(part.strip() for part in _KEY_SPLIT_RE.split(line))
        else:
            out.append(line)
    return "\n".join(out)


def normalize_text(text: str) -> str:
    for rule in (clean_whitespace, drop_watermarks, split_glued_items, rejoin_fragments, mark_answer_key):
        text = rule(text)
    return text
