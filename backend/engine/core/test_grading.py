# core/test_grading.py
import pytest

from engine.core.grading import (
    NMT_TABLES,
    build_answer_rows,
    calculate_percentage,
    calculate_points,
    check_answer,
    convert_to_nmt_scale,
    count_correct,
    default_points,
    derive_correct_answers,
    grade_submission,
    resolve_points,
)
from engine.core.question_types import MatchingQuestion, SelectThreeQuestion, SingleChoiceQuestion


# =========================
# check_answer
# =========================

def test_single_choice():
    assert check_answer("single_choice", "a1", ["a1"]) == (True, False)
    assert check_answer("single_choice", ["a1"], ["a1"]) == (True, False)
    assert check_answer("single_choice", "a2", ["a1"]) == (False, False)


def test_written_is_case_and_whitespace_insensitive():
    assert check_answer("written", "Кіт", ["кіт"]) == (True, False)
    assert check_answer("written", "  кіт ", ["Кіт"]) == (True, False)
    assert check_answer("written", "пес", ["кіт"]) == (False, False)


def test_select_three_partial():
    assert check_answer("select_three", ["2", "4"], ["2", "4", "6"]) == (False, True)
    assert check_answer("select_three", ["6", "2", "4"], ["2", "4", "6"]) == (True, False)
    assert calculate_points(False, True, 3, 2, 3) == 2


def test_multiple_answers_is_symmetric():
    a, b = ["x", "y"], ["y", "z"]
    assert check_answer("multiple_answers", a, b)[0] == check_answer("multiple_answers", b, a)[0]
    assert check_answer("multiple_answers", ["y", "x"], ["x", "y"]) == (True, False)
    assert check_answer("multiple_answers", ["q"], ["x", "y"]) == (False, False)


def test_repeated_picks_do_not_exceed_question_points():
    user, correct = ["1", "1", "1"], ["1", "2"]
    assert check_answer("multiple_answers", user, correct) == (False, True)
    assert count_correct("multiple_answers", user, correct) == (1, 2)
    hits, total = count_correct("multiple_answers", user, correct)
    assert calculate_points(False, True, 2, hits, total) == 1


def test_matching_is_position_wise():
    assert check_answer("matching", ["А", "Б", "В"], ["А", "Б", "В"]) == (True, False)
    assert check_answer("matching", ["А", "Б", "Г"], ["А", "Б", "В"]) == (False, True)
    assert check_answer("matching", ["Б", "А", "В"], ["А", "Б", "Г"]) == (False, False)
    assert count_correct("matching", ["А", "Б", "Г"], ["А", "Б", "В"]) == (2, 3)


@pytest.mark.parametrize(
    "qtype, user, correct",
    [
        ("essay", "x", ["x"]),
        ("matching", [], []),
        ("single_choice", "a", []),
        ("written", None, None),
    ],
)
def test_unknown_type_or_empty_correct_is_wrong(qtype, user, correct):
    assert check_answer(qtype, user, correct) == (False, False)


# =========================
# points / scale
# =========================

def test_calculate_points():
    assert calculate_points(True, False, 4) == 4
    assert calculate_points(False, False, 4, 3, 4) == 0
    assert calculate_points(False, True, 1, 1, 2) == 1
    assert calculate_points(False, True, 4, 1, 4) == 1
    assert calculate_points(False, True, 4, 0, 4) == 0


def test_nmt_scale_boundaries():
    assert convert_to_nmt_scale(0, "mathematics") == 0
    assert convert_to_nmt_scale(4, "mathematics") == 0
    assert convert_to_nmt_scale(5, "mathematics") == 100
    assert convert_to_nmt_scale(32, "mathematics") == 200
    assert convert_to_nmt_scale(40, "mathematics") == 200
    assert convert_to_nmt_scale(45, "ukrainian-language") == 200
    assert convert_to_nmt_scale(54, "history-ukraine") == 200


def test_nmt_scale_unknown_subject_is_linear():
    assert convert_to_nmt_scale(50, "chemistry") == 100
    assert convert_to_nmt_scale(150) == 200
    assert convert_to_nmt_scale(-5) == 0


@pytest.mark.parametrize("subject", sorted(NMT_TABLES) + ["unknown"])
def test_nmt_scale_is_monotonic(subject):
    scores = [convert_to_nmt_scale(raw, subject) for raw in range(0, 120)]
    assert scores == sorted(scores)


def test_calculate_percentage():
    assert calculate_percentage(1, 3) == 33
    assert calculate_percentage(2, 3) == 67
    assert calculate_percentage(1, 2) == 50
    assert calculate_percentage(0, 0) == 0


def test_default_and_resolved_points():
    assert default_points("written") == 2
    assert default_points("matching") == 4
    assert default_points("matching", 3) == 3
    assert default_points("matching", 2) == 4
    assert default_points("select_three") == 3
    assert default_points("single_choice") == 1

    assert resolve_points("written", None) == 2
    assert resolve_points("written", 1) == 2
    assert resolve_points("written", 5) == 5
    assert resolve_points("single_choice", 1) == 1
    assert resolve_points("single_choice", 3) == 3


# =========================
# stored rows
# =========================

def test_derive_correct_answers():
    matching_rows = [
        {"order": 1, "matching_pair": "Б"},
        {"order": 0, "matching_pair": "А"},
        {"order": 2, "matching_pair": None},
    ]
    assert derive_correct_answers("matching", matching_rows) == ["А", "Б"]

    select_rows = [{"order": i, "is_correct": i in (2, 5, 7)} for i in range(1, 8)]
    assert derive_correct_answers("select_three", select_rows) == ["2", "5", "7"]

    written_rows = [{"id": "w1", "content": "42", "is_correct": True}]
    assert derive_correct_answers("written", written_rows) == ["42"]

    choice_rows = [{"id": "a1", "is_correct": False}, {"id": "a2", "is_correct": True}]
    assert derive_correct_answers("single_choice", choice_rows) == ["a2"]


def test_build_answer_rows():
    single = SingleChoiceQuestion(text="q", options=["А", "Б", "В", "Г"], correct_answer=1)
    rows = build_answer_rows(single)
    assert [r["is_correct"] for r in rows] == [False, True, False, False]

    matching = MatchingQuestion(text="q", correct_answer=["А", "Б"])
    rows = build_answer_rows(matching)
    assert len(rows) == 4
    assert [r["matching_pair"] for r in rows] == ["А", "Б", None, None]
    assert derive_correct_answers("matching", rows) == ["А", "Б"]

    select = SelectThreeQuestion(text="q", options=list("abcdefg"), correct_answer=["1", "3", "5"])
    rows = build_answer_rows(select)
    assert [r["order"] for r in rows if r["is_correct"]] == [1, 3, 5]
    assert rows[2]["content"] == "c"


# =========================
# submission
# =========================

QUESTIONS = [
    {"id": "q1", "type": "single_choice", "answers": [
        {"id": "a1", "is_correct": False}, {"id": "a2", "is_correct": True},
    ]},
    {"id": "q2", "type": "written", "answers": [
        {"id": "w", "content": "42", "is_correct": True},
    ]},
    {"id": "q3", "type": "select_three", "answers": [
        {"id": f"s{i}", "order": i, "is_correct": i in (2, 4, 6)} for i in range(1, 8)
    ]},
    {"id": "q4", "type": "matching", "answers": [
        {"id": f"m{i}", "order": i, "matching_pair": p, "is_correct": True}
        for i, p in enumerate("АБВГ")
    ]},
]

ANSWERS = [
    {"question_id": "q1", "answer": "a2"},
    {"question_id": "q2", "answer": " 42 "},
    {"question_id": "q3", "answer": ["2", "4"]},
    {"question_id": "q4", "answer": ["А", "Б", "Г", "В"]},
    {"question_id": "missing", "answer": "x"},
]


def test_grade_submission_practice():
    result = grade_submission(QUESTIONS, ANSWERS, test_type="practice", subject_slug="mathematics")
    assert result["correct_answers"] == 2
    assert result["total_questions"] == 4
    assert result["earned_points"] == 7
    assert result["max_points"] == 10
    assert result["percentage"] == pytest.approx(70.0)
    assert result["raw_score"] == 50
    assert result["scaled_score"] == 7
    assert [d["points"] for d in result["details"]] == [1, 2, 2, 2]


def test_grade_submission_past_nmt_uses_scale():
    result = grade_submission(QUESTIONS, ANSWERS, test_type="past_nmt", subject_slug="mathematics")
    assert result["scaled_score"] == convert_to_nmt_scale(2, "mathematics")
