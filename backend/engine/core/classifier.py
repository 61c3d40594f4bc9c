# core/classifier.py
"""
Question type decision + correct-answer shaping.

Stateless per block: same (prompt, options, token) -> same question.
Problems never raise; they come back as warning strings for the caller's WarningMap.
"""
from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

from engine.core.hints import MATCHING_HINT_RE, SELECT_THREE_HINT_RE, SEQUENCE_HINT_RE
from engine.core.option_extractor import ExtractedOptions
from engine.core.question_types import (
    MatchingQuestion,
    MultipleAnswersQuestion,
    Question,
    QuestionType,
    SelectThreeQuestion,
    SingleChoiceQuestion,
    WrittenQuestion,
)
from engine.core.subjects import SubjectProfile, TypeOverride, forced_type

_NUMERIC_RE = re.compile(r"^-?\d+(?:[.,]\d+)?$")
_LEFT_MARKER_RE = re.compile(r"^\d{1,3}[.)]\s*")

MIN_CHOICE_OPTIONS = 4
TOO_MANY_OPTIONS = 5
SELECT_THREE_OPTIONS = 7

# =========================
# Warning texts
# =========================
WARN_NO_ANSWER = "no answer in key"
WARN_NO_OPTIONS = "no options found, placeholders used"
WARN_FEW_OPTIONS = "fewer than 4 options, padded"
WARN_OUT_OF_RANGE = "answer letter does not match any option"
WARN_TOO_MANY = "too many options"
WARN_NEEDS_OPTIONS = "matching question needs at least 4 options"
WARN_SEQUENCE_ONE_LETTER = "sequence hint but single-letter answer"
WARN_SEQUENCE_NOT_MATCHING = "sequence hint but not classified as matching"
WARN_SELECT_THREE_COUNT = "select-three answer must name 3 options"
WARN_SELECT_THREE_OPTIONS = "select-three question needs 7 options"


# =========================
# Helpers
# =========================

def _letters(token: str) -> str:
    return token if token.isalpha() else ""


def _resolved_indices(letters: str, profile: SubjectProfile) -> List[int]:
    out: List[int] = []
    for ch in letters:
        idx = profile.letter_index(ch)
        if idx is not None and idx not in out:
            out.append(idx)
    return out


def _canonical_letter(ch: str, profile: SubjectProfile) -> str:
    idx = profile.letter_index(ch)
    return profile.letter_at(idx) if idx is not None else ch


def _choice_text(ex: ExtractedOptions) -> str:
    parts = [ex.prompt] if ex.prompt else []
    if ex.option_lines_raw:
        parts.append("\n".join(ex.option_lines_raw))
    return "\n\n".join(parts)


def _matching_text(ex: ExtractedOptions) -> str:
    return "\n".join(p for p in [ex.prompt, *ex.left_items, *ex.option_lines_raw] if p)


def _letter_options(count: int, profile: SubjectProfile) -> List[str]:
    return [profile.letter_at(i) for i in range(count)]


# =========================
# Builders (one per type)
# =========================

def _build_written(ex: ExtractedOptions, token: str) -> Tuple[Question, List[str]]:
    warnings = [] if token else [WARN_NO_ANSWER]
    question = WrittenQuestion(
        text=ex.prompt, correct_answer=token, image_url=ex.image_url, image_width=ex.image_width
    )
    return question, warnings


def _build_matching(ex: ExtractedOptions, token: str, profile: SubjectProfile, forced: bool) -> Tuple[Question, List[str]]:
    warnings: List[str] = []
    letters = _letters(token)
    if not letters:
        warnings.append(WARN_NO_ANSWER)
    if not forced and len(ex.option_lines_raw) < MIN_CHOICE_OPTIONS:
        warnings.append(WARN_NEEDS_OPTIONS)
    correct = [_canonical_letter(ch, profile) for ch in letters]
    question = MatchingQuestion(
        text=_matching_text(ex),
        correct_answer=correct,
        image_url=ex.image_url,
        image_width=ex.image_width,
    )
    return question, warnings


def _build_select_three(ex: ExtractedOptions, token: str, profile: SubjectProfile) -> Tuple[Question, List[str]]:
    warnings: List[str] = []
    if ex.options:
        texts = list(ex.options)
    else:
        texts = [_LEFT_MARKER_RE.sub("", item) for item in ex.left_items]

    positions: List[str] = []
    for ch in token:
        if ch.isdigit():
            pos = int(ch)
        else:
            idx = profile.letter_index(ch)
            pos = idx + 1 if idx is not None else 0
        if 1 <= pos <= SELECT_THREE_OPTIONS and str(pos) not in positions:
            positions.append(str(pos))

    if len(positions) != 3:
        warnings.append(WARN_SELECT_THREE_COUNT)
    if len(texts) != SELECT_THREE_OPTIONS:
        warnings.append(WARN_SELECT_THREE_OPTIONS)

    padded = (texts + [""] * SELECT_THREE_OPTIONS)[:SELECT_THREE_OPTIONS]
    question = SelectThreeQuestion(
        text=ex.prompt,
        options=padded,
        correct_answer=positions,
        image_url=ex.image_url,
        image_width=ex.image_width,
    )
    return question, warnings


def _build_multiple(ex: ExtractedOptions, token: str, profile: SubjectProfile) -> Tuple[Question, List[str]]:
    warnings: List[str] = []
    letters = _letters(token)
    indices = _resolved_indices(letters, profile)
    if not letters:
        warnings.append(WARN_NO_ANSWER)

    count = len(ex.options)
    if count == 0:
        warnings.append(WARN_NO_OPTIONS)
        count = max(MIN_CHOICE_OPTIONS, max(indices, default=-1) + 1)

    correct = [i for i in range(count) if i in indices]
    question = MultipleAnswersQuestion(
        text=_choice_text(ex),
        options=_letter_options(count, profile),
        correct_answer=correct,
        image_url=ex.image_url,
        image_width=ex.image_width,
    )
    return question, warnings


def _build_single(ex: ExtractedOptions, token: str, profile: SubjectProfile) -> Tuple[Question, List[str]]:
    warnings: List[str] = []
    count = len(ex.options)

    if count == 0:
        # image-only or unparsable options
        question = SingleChoiceQuestion(
            text=_choice_text(ex),
            options=_letter_options(MIN_CHOICE_OPTIONS, profile),
            correct_answer=0,
            image_url=ex.image_url,
            image_width=ex.image_width,
        )
        return question, [WARN_NO_OPTIONS]

    if count < MIN_CHOICE_OPTIONS:
        warnings.append(WARN_FEW_OPTIONS)
        count = MIN_CHOICE_OPTIONS

    letters = _letters(token)
    correct = 0
    if not letters:
        warnings.append(WARN_NO_ANSWER)
    else:
        idx = profile.letter_index(letters[0])
        if idx is None or idx >= count:
            warnings.append(WARN_OUT_OF_RANGE)
        else:
            correct = idx

    question = SingleChoiceQuestion(
        text=_choice_text(ex),
        options=_letter_options(count, profile),
        correct_answer=correct,
        image_url=ex.image_url,
        image_width=ex.image_width,
    )
    return question, warnings


# =========================
# Public
# =========================

def classify_question(
    number: int,
    ex: ExtractedOptions,
    token: str,
    profile: SubjectProfile,
    overrides: Sequence[TypeOverride] = (),
) -> Tuple[Question, List[str]]:
    """
    Decision order (first match wins):
      0. override for this question number
      1. numeric token, no options          -> written
      2. >= 2 letters + matching hint        -> matching
      3. >= 2 letters + sequence hint        -> matching
      4. 3 symbols + select-three shape      -> select_three
      5. >= 2 letters                        -> multiple_answers
      6. otherwise                           -> single_choice
    """
    token = (token or "").strip()
    letters = _letters(token)
    hint_text = ex.prompt
    has_matching_hint = bool(MATCHING_HINT_RE.search(hint_text))
    has_sequence_hint = bool(SEQUENCE_HINT_RE.search(hint_text))

    forced: Optional[QuestionType] = forced_type(number, overrides)
    if forced == QuestionType.WRITTEN:
        question, warnings = _build_written(ex, token)
    elif forced == QuestionType.MATCHING:
        question, warnings = _build_matching(ex, token, profile, forced=True)
    elif forced == QuestionType.SELECT_THREE:
        question, warnings = _build_select_three(ex, token, profile)
    elif forced == QuestionType.MULTIPLE_ANSWERS:
        question, warnings = _build_multiple(ex, token, profile)
    elif forced == QuestionType.SINGLE_CHOICE:
        question, warnings = _build_single(ex, token, profile)

    elif _NUMERIC_RE.match(token) and not ex.options and not ex.left_items:
        question, warnings = _build_written(ex, token)
    elif len(letters) >= 2 and (has_matching_hint or has_sequence_hint):
        question, warnings = _build_matching(ex, token, profile, forced=False)
    elif len(token) == 3 and (token.isalpha() or token.isdigit()) and (
        SELECT_THREE_HINT_RE.search(hint_text)
        or SELECT_THREE_OPTIONS in (len(ex.options), len(ex.left_items))
    ):
        question, warnings = _build_select_three(ex, token, profile)
    elif len(letters) >= 2:
        question, warnings = _build_multiple(ex, token, profile)
    else:
        question, warnings = _build_single(ex, token, profile)

    if question.type in (QuestionType.SINGLE_CHOICE, QuestionType.MULTIPLE_ANSWERS):
        if ex.parsed_option_count > TOO_MANY_OPTIONS:
            warnings.append(WARN_TOO_MANY)

    if has_sequence_hint and question.type != QuestionType.MATCHING:
        if len(letters) == 1:
            warnings.append(WARN_SEQUENCE_ONE_LETTER)
        else:
            warnings.append(WARN_SEQUENCE_NOT_MATCHING)

    return question, warnings
