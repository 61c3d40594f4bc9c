# core/grading.py
"""
Answer checking, partial credit and NMT 100-200 scale conversion.

Pure functions. Bad shapes never raise: they grade as (False, False) so a
submitted test always produces a score.
"""
from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from engine.core.question_types import Question, QuestionType

AnswerValue = Union[str, int, Sequence[Any], None]

# =========================
# NMT conversion tables (raw correct count -> scaled score)
# =========================
NMT_TABLES: Dict[str, Dict[int, int]] = {
    "ukrainian-language": {
        8: 100, 9: 105, 10: 110, 11: 120, 12: 125, 13: 130, 14: 134, 15: 136,
        16: 138, 17: 140, 18: 142, 19: 143, 20: 144, 21: 145, 22: 146, 23: 148,
        24: 149, 25: 150, 26: 152, 27: 154, 28: 156, 29: 157, 30: 159, 31: 160,
        32: 162, 33: 163, 34: 165, 35: 167, 36: 170, 37: 172, 38: 175, 39: 177,
        40: 180, 41: 183, 42: 186, 43: 191, 44: 195, 45: 200,
    },
    "mathematics": {
        5: 100, 6: 108, 7: 115, 8: 123, 9: 131, 10: 134, 11: 137, 12: 140,
        13: 143, 14: 145, 15: 147, 16: 148, 17: 149, 18: 150, 19: 151, 20: 152,
        21: 155, 22: 159, 23: 163, 24: 167, 25: 170, 26: 173, 27: 176, 28: 180,
        29: 184, 30: 189, 31: 194, 32: 200,
    },
    "history-ukraine": {
        9: 100, 10: 105, 11: 110, 12: 115, 13: 120, 14: 125, 15: 130, 16: 132,
        17: 134, 18: 136, 19: 138, 20: 140, 21: 141, 22: 142, 23: 143, 24: 144,
        25: 145, 26: 146, 27: 147, 28: 148, 29: 149, 30: 150, 31: 151, 32: 152,
        33: 154, 34: 156, 35: 158, 36: 160, 37: 163, 38: 166, 39: 168, 40: 169,
        41: 170, 42: 172, 43: 173, 44: 175, 45: 177, 46: 179, 47: 181, 48: 183,
        49: 185, 50: 188, 51: 191, 52: 194, 53: 197, 54: 200,
    },
    "english-language": {
        5: 100, 6: 109, 7: 118, 8: 125, 9: 131, 10: 134, 11: 137, 12: 140,
        13: 143, 14: 145, 15: 147, 16: 148, 17: 149, 18: 150, 19: 151, 20: 152,
        21: 153, 22: 155, 23: 157, 24: 159, 25: 162, 26: 166, 27: 169, 28: 173,
        29: 179, 30: 185, 31: 191, 32: 200,
    },
}

PAST_NMT = "past_nmt"


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _as_list(value: AnswerValue) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(v) for v in value if v is not None]
    return [str(value)]


# =========================
# Checking
# =========================

def check_answer(question_type: Any, user_answer: AnswerValue, correct_answers: AnswerValue) -> Tuple[bool, bool]:
    """(is_correct, partial_credit)"""
    qtype = QuestionType.parse(question_type)
    correct = _as_list(correct_answers)
    if qtype is None or not correct:
        return False, False

    if qtype == QuestionType.SINGLE_CHOICE:
        user = _as_list(user_answer)
        return (len(user) == 1 and user[0] == correct[0]), False

    if qtype == QuestionType.WRITTEN:
        user = _as_list(user_answer)
        if len(user) != 1:
            return False, False
        return user[0].strip().lower() == correct[0].strip().lower(), False

    if qtype in (QuestionType.MULTIPLE_ANSWERS, QuestionType.SELECT_THREE):
        user_set, correct_set = set(_as_list(user_answer)), set(correct)
        is_correct = user_set == correct_set
        return is_correct, bool(user_set & correct_set) and not is_correct

    if qtype == QuestionType.MATCHING:
        user = _as_list(user_answer)
        hits = sum(1 for i, c in enumerate(correct) if i < len(user) and user[i] and user[i] == c)
        is_correct = hits == len(correct)
        return is_correct, hits > 0 and not is_correct

    return False, False


def count_correct(question_type: Any, user_answer: AnswerValue, correct_answers: AnswerValue) -> Tuple[int, int]:
    """(correct_count, total_answers) for partial-credit points."""
    qtype = QuestionType.parse(question_type)
    user = _as_list(user_answer)
    correct = _as_list(correct_answers)

    if qtype == QuestionType.MATCHING:
        hits = sum(1 for i, c in enumerate(correct) if i < len(user) and user[i] and user[i] == c)
        return hits, len(correct)
    if qtype == QuestionType.SELECT_THREE:
        user_set = set(user)
        return sum(1 for c in correct if c in user_set), len(correct)
    return len(set(user) & set(correct)), len(set(correct))


# =========================
# Points / scale
# =========================

def calculate_points(
    is_correct: bool,
    partial_credit: bool,
    total_points: float,
    correct_count: Optional[int] = None,
    total_answers: Optional[int] = None,
) -> float:
    if is_correct:
        return total_points
    if partial_credit and correct_count and total_answers:
        return round_half_up(total_points * correct_count / total_answers)
    return 0


def convert_to_nmt_scale(raw_correct_count: int, subject_slug: Optional[str] = None) -> int:
    table = NMT_TABLES.get(subject_slug or "")
    if table:
        keys = sorted(table)
        if raw_correct_count < keys[0]:
            return 0
        if raw_correct_count in table:
            return table[raw_correct_count]
        floor_key = max(k for k in keys if k <= raw_correct_count)
        return table[floor_key]

    clamped = max(0, min(100, raw_correct_count))
    return round_half_up(clamped / 100 * 200)


def calculate_percentage(correct: int, total: int) -> int:
    if total == 0:
        return 0
    return round_half_up(correct / total * 100)


def default_points(question_type: Any, row_count: Optional[int] = None) -> int:
    qtype = QuestionType.parse(question_type)
    if qtype == QuestionType.WRITTEN:
        return 2
    if qtype == QuestionType.MATCHING:
        return row_count if row_count and row_count >= 3 else 4
    if qtype == QuestionType.SELECT_THREE:
        return 3
    return 1


def resolve_points(question_type: Any, stored: Optional[float] = None, row_count: Optional[int] = None) -> float:
    """Stored value wins unless missing, or <= 1 while the type default is higher."""
    base = default_points(question_type, row_count)
    if stored is None:
        return base
    if stored <= 1 and base > 1:
        return base
    return stored


# =========================
# Stored answer rows
# =========================
# row: {"id", "content", "is_correct", "order", "matching_pair"}

def derive_correct_answers(question_type: Any, rows: Iterable[Dict[str, Any]]) -> List[str]:
    """Comparable correct answers for check_answer, built from stored rows."""
    qtype = QuestionType.parse(question_type)
    rows = list(rows or [])
    correct_rows = [r for r in rows if r.get("is_correct")]

    if qtype == QuestionType.MATCHING:
        ordered = sorted(rows, key=lambda r: r.get("order") or 0)
        return [str(r["matching_pair"]) for r in ordered if r.get("matching_pair")]
    if qtype == QuestionType.SELECT_THREE:
        return [str(r.get("order")) for r in correct_rows]
    if qtype == QuestionType.WRITTEN:
        return [str(r.get("content") or "") for r in correct_rows]
    return [str(r.get("id")) for r in correct_rows]


def build_answer_rows(question: Question) -> List[Dict[str, Any]]:
    """Rows the persistence layer stores for a parsed question (ids are assigned there)."""
    qtype = question.type
    if qtype == QuestionType.WRITTEN:
        answer = str(question.correct_answer or "").strip()
        if not answer:
            return []
        return [{"content": str(question.correct_answer), "is_correct": True, "order": 0}]

    if qtype == QuestionType.MATCHING:
        pairs = list(question.correct_answer)
        row_count = len(pairs) if len(pairs) >= 3 else 4
        return [
            {
                "content": str(i + 1),
                "is_correct": True,
                "order": i,
                "matching_pair": str(pairs[i]) if i < len(pairs) and pairs[i] else None,
            }
            for i in range(row_count)
        ]

    if qtype == QuestionType.SELECT_THREE:
        correct = {str(c) for c in question.correct_answer}
        return [
            {
                "content": question.options[i - 1] if i - 1 < len(question.options) else "",
                "is_correct": str(i) in correct,
                "order": i,
            }
            for i in range(1, 8)
        ]

    if isinstance(question.correct_answer, list):
        correct_idx = set(question.correct_answer)
    else:
        correct_idx = {question.correct_answer}
    return [
        {"content": opt, "is_correct": i in correct_idx, "order": i}
        for i, opt in enumerate(question.options)
    ]


# =========================
# Submission
# =========================

def grade_submission(
    questions: Sequence[Dict[str, Any]],
    answers: Sequence[Dict[str, Any]],
    test_type: Optional[str] = None,
    subject_slug: Optional[str] = None,
) -> Dict[str, Any]:
    """
    questions: [{"id", "type", "points"?, "answers": [row, ...]}]
    answers:   [{"question_id", "answer"}]
    Answers pointing at unknown question ids are skipped.
    """
    by_id = {str(q.get("id")): q for q in questions}

    correct_count = 0
    earned = 0
    max_points = 0
    details: List[Dict[str, Any]] = []

    for ans in answers:
        question = by_id.get(str(ans.get("question_id")))
        if question is None:
            continue

        qtype = question.get("type")
        rows = question.get("answers") or []
        correct = derive_correct_answers(qtype, rows)
        row_count = len(correct) if QuestionType.parse(qtype) == QuestionType.MATCHING else None
        points = resolve_points(qtype, question.get("points"), row_count)
        max_points += points

        is_correct, partial = check_answer(qtype, ans.get("answer"), correct)
        got = 0
        if is_correct:
            correct_count += 1
            got = points
        elif partial:
            hits, total = count_correct(qtype, ans.get("answer"), correct)
            got = calculate_points(False, True, points, hits, total)
        earned += got

        details.append({
            "question_id": str(question.get("id")),
            "is_correct": is_correct,
            "partial_credit": partial,
            "points": got,
            "max_points": points,
        })

    total_questions = len(questions)
    if max_points > 0:
        percentage = earned / max_points * 100
    elif total_questions:
        percentage = correct_count / total_questions * 100
    else:
        percentage = 0.0

    scaled = convert_to_nmt_scale(correct_count, subject_slug) if test_type == PAST_NMT else earned

    return {
        "correct_answers": correct_count,
        "total_questions": total_questions,
        "raw_score": calculate_percentage(correct_count, total_questions),
        "earned_points": earned,
        "max_points": max_points,
        "percentage": percentage,
        "scaled_score": scaled,
        "details": details,
    }
