# core/segmenter.py
"""
Normalized text -> question blocks + answer-key lines.

Boundary rule: a "N." marker only opens a new block when N is the expected
next number. Years, statistics and sub-steps inside prose break the +1 chain
and stay inside the current block.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from engine.core.errors import NoAnswerKeyError
from engine.core.hints import HINT_RANGE_RE, MATCHING_HINT_RE, SHARED_OPTIONS_HINT_RE
from engine.core.normalizer import ANSWERS_SENTINEL, OPTION_START_RE
from engine.core.option_extractor import parse_option_header
from engine.core.subjects import DEFAULT_PROFILE, OPTION_LETTER_CLASS, SubjectProfile

logger = logging.getLogger(__name__)

SENTINELS = {ANSWERS_SENTINEL, "ANSWERS"}

# number, optional "." / ")", then a letter or digit
_KEY_ENTRY_RE = re.compile(
    rf"^\d{{1,3}}\s?[.)\-–]?\s*[{OPTION_LETTER_CLASS}a-zа-яіїєґ\d]"
)
QUESTION_START_RE = re.compile(
    rf"^(?P<num>\d{{1,3}})\.\s*(?=[\"'«“„(]?\s*[{OPTION_LETTER_CLASS}]|\[(?i:image|img)\b)"
)
_BARE_NUMBER_RE = re.compile(r"^\d{1,6}$")


# =========================
# Types
# =========================

@dataclass
class ParsedBlock:
    question_number: int
    raw_text: str
    # index of the marker line within the body
    line_index: int = 0
    strong: bool = False


@dataclass
class SharedOptionGroup:
    """Lettered options printed once for several adjacent questions."""
    line_index: int
    options: List[str]
    start: Optional[int] = None
    end: Optional[int] = None

    def allows(self, number: int) -> bool:
        if self.start is None or self.end is None:
            return True
        return self.start <= number <= self.end


@dataclass
class SegmentResult:
    blocks: List[ParsedBlock]
    key_lines: List[str]
    shared_groups: List[SharedOptionGroup] = field(default_factory=list)


# =========================
# Answer-key split
# =========================

def split_answer_key(text: str) -> Tuple[List[str], List[str]]:
    """
    (body_lines, key_lines) around the last sentinel that is followed by a key entry.
    Raises NoAnswerKeyError when there is none.
    """
    lines = (text or "").split("\n")
    found: Optional[int] = None
    for i, line in enumerate(lines):
        if line.strip().upper() not in SENTINELS:
            continue
        nxt = next((ln.strip() for ln in lines[i + 1:] if ln.strip()), "")
        if _KEY_ENTRY_RE.match(nxt):
            found = i

    if found is None:
        raise NoAnswerKeyError()
    return lines[:found], [ln.strip() for ln in lines[found + 1:] if ln.strip()]


# =========================
# Shared option groups
# =========================

def _read_option_run(lines: List[str], start: int, profile: SubjectProfile) -> Tuple[List[str], int]:
    """Options starting at lines[start] (must be the first letter). Returns (options, end_exclusive)."""
    options: List[str] = []
    i = start
    while i < len(lines):
        line = lines[i]
        if not line or QUESTION_START_RE.match(line):
            break
        opt = parse_option_header(line, profile, len(options))
        if opt is not None:
            options.append(opt)
        elif options and not OPTION_START_RE.match(line):
            options[-1] = f"{options[-1]} {line}".strip()
        else:
            break
        i += 1
    return options, i


def _hint_range(line: str) -> Tuple[Optional[int], Optional[int]]:
    m = HINT_RANGE_RE.search(line)
    if not m:
        return None, None
    a, b = int(m.group(1)), int(m.group(2))
    return min(a, b), max(a, b)


def _extract_shared_groups(
    lines: List[str], first_question: int, profile: SubjectProfile
) -> Tuple[List[str], List[SharedOptionGroup]]:
    """Blank out shared-group lines in place of removal so indices stay stable."""
    out = list(lines)
    groups: List[SharedOptionGroup] = []
    i = 0
    while i < len(out):
        line = out[i]
        in_preamble = i < first_question
        is_hint = bool(SHARED_OPTIONS_HINT_RE.match(line))

        start = i + 1 if is_hint else i
        if not is_hint and not (in_preamble and parse_option_header(line, profile, 0) is not None):
            i += 1
            continue

        options, end = _read_option_run(out, start, profile)
        if len(options) < 2:
            i += 1
            continue

        lo, hi = _hint_range(line) if is_hint else (None, None)
        groups.append(SharedOptionGroup(line_index=i, options=options, start=lo, end=hi))
        for j in range(i, end):
            out[j] = ""
        i = end

    return out, groups


# =========================
# Boundaries
# =========================

def _find_candidates(lines: List[str]) -> List[Tuple[int, int, bool]]:
    """(line_index, number, strong) for every question-start marker."""
    cands: List[Tuple[int, int, bool]] = []
    first_content = next((i for i, ln in enumerate(lines) if ln), 0)
    for i, line in enumerate(lines):
        m = QUESTION_START_RE.match(line)
        if not m:
            continue
        prev = lines[i - 1] if i > 0 else ""
        strong = i == first_content or not prev or bool(OPTION_START_RE.match(prev))
        cands.append((i, int(m.group("num")), strong))
    return cands


def _superseded(pos: int, cands: List[Tuple[int, int, bool]]) -> bool:
    """Weak candidate loses to a strong one with the same number before N+1 shows up."""
    _, num, strong = cands[pos]
    if strong:
        return False
    for _, other_num, other_strong in cands[pos + 1:]:
        if other_num == num + 1:
            return False
        if other_num == num and other_strong:
            return True
    return False


def segment_text(text: str, profile: SubjectProfile = DEFAULT_PROFILE) -> SegmentResult:
    body, key_lines = split_answer_key(text)
    body = [ln.strip() for ln in body]
    body = [ln for ln in body if not _BARE_NUMBER_RE.match(ln)]

    cands = _find_candidates(body)
    first_question = cands[0][0] if cands else len(body)
    body, groups = _extract_shared_groups(body, first_question, profile)

    # re-scan: group lines are blank now
    cands = _find_candidates(body)
    cand_pos = {c[0]: k for k, c in enumerate(cands)}

    blocks: List[ParsedBlock] = []
    current: Optional[ParsedBlock] = None
    current_lines: List[str] = []
    expected: Optional[int] = None
    in_matching = False
    seen_options = False

    def flush():
        if current is None:
            return
        joined = "\n".join(ln for ln in current_lines if ln)
        if re.sub(r"^\d{1,3}[.)]\s*", "", joined).strip():
            current.raw_text = joined
            blocks.append(current)

    for i, line in enumerate(body):
        k = cand_pos.get(i)
        if k is not None:
            _, num, strong = cands[k]
            guarded = (
                current is not None
                and in_matching
                and not seen_options
                and num <= profile.matching_guard_rows
            )
            accept = not guarded and (expected is None or num == expected) and not _superseded(k, cands)
            if accept:
                flush()
                current = ParsedBlock(question_number=num, raw_text="", line_index=i, strong=strong)
                current_lines = [line]
                expected = num + 1
                in_matching = bool(MATCHING_HINT_RE.search(line))
                seen_options = False
                continue

        if current is None:
            continue
        current_lines.append(line)
        if MATCHING_HINT_RE.search(line):
            in_matching = True
        if OPTION_START_RE.match(line):
            seen_options = True
    flush()

    logger.debug(
        f"segmented: blocks={len(blocks)} key_lines={len(key_lines)} shared_groups={len(groups)}"
    )
    return SegmentResult(blocks=blocks, key_lines=key_lines, shared_groups=groups)
