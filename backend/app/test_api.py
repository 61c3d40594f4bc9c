# app/test_api.py
from fastapi.testclient import TestClient

from app.main import app
from app.core.config import API_PREFIX

client = TestClient(app)

EXAMPLE = "1. What is 2+2?\nА. 3\nБ. 4\nВ. 5\nГ. 6\nВІДПОВІДІ\n1. Б"


def test_health():
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/").status_code == 200


def test_ingest_example():
    res = client.post(f"{API_PREFIX}/ingest", json={"text": EXAMPLE})
    assert res.status_code == 200
    body = res.json()
    assert body["warnings"] == {}
    q = body["questions"][0]
    assert q["type"] == "single_choice"
    assert q["options"] == ["А", "Б", "В", "Г"]
    assert q["correct_answer"] == 1
    assert body["meta"]["question_numbers"] == [1]


def test_ingest_append_mode_and_overrides():
    text = (
        "3. Перше питання\nА. a\nБ. b\nВ. c\nГ. d\n"
        "4. Друге питання\n"
        "ВІДПОВІДІ\n3. А\n4. 17"
    )
    res = client.post(
        f"{API_PREFIX}/ingest",
        json={
            "text": text,
            "existing_count": 5,
            "overrides": [{"start": 4, "end": 4, "type": "written"}],
        },
    )
    assert res.status_code == 200
    body = res.json()
    assert [q["type"] for q in body["questions"]] == ["single_choice", "written"]
    assert body["questions"][1]["correct_answer"] == "17"
    assert body["warnings"] == {}


def test_ingest_without_key_is_400():
    res = client.post(f"{API_PREFIX}/ingest", json={"text": "1. Питання\nА. так\nБ. ні"})
    assert res.status_code == 400
    assert res.json()["detail"]["error"] == "NO_ANSWER_KEY"


def test_ingest_empty_is_400():
    res = client.post(f"{API_PREFIX}/ingest", json={"text": "  "})
    assert res.status_code == 400
    assert res.json()["detail"]["error"] == "EMPTY_INPUT"


def test_ingest_too_large_is_413(monkeypatch):
    monkeypatch.setattr("app.services.ingest_service.MAX_TEXT_CHARS", 10)
    res = client.post(f"{API_PREFIX}/ingest", json={"text": EXAMPLE})
    assert res.status_code == 413
    assert res.json()["detail"]["error"] == "TEXT_TOO_LARGE"


def test_ingest_bad_override_is_422():
    res = client.post(
        f"{API_PREFIX}/ingest",
        json={"text": EXAMPLE, "overrides": [{"start": 5, "end": 2, "type": "written"}]},
    )
    assert res.status_code == 422


def test_grading_check_partial():
    res = client.post(
        f"{API_PREFIX}/grading/check",
        json={"type": "select_three", "user_answer": ["2", "4"], "correct_answers": ["2", "4", "6"]},
    )
    assert res.status_code == 200
    assert res.json() == {"is_correct": False, "partial_credit": True, "points": 2}


def test_grading_check_written():
    res = client.post(
        f"{API_PREFIX}/grading/check",
        json={"type": "written", "user_answer": "Кіт", "correct_answers": ["кіт"]},
    )
    body = res.json()
    assert body["is_correct"] is True
    assert body["points"] == 2


def test_grading_submit():
    payload = {
        "test_type": "past_nmt",
        "subject_slug": "mathematics",
        "questions": [
            {"id": "q1", "type": "single_choice", "answers": [
                {"id": "a1", "is_correct": True}, {"id": "a2"},
            ]},
            {"id": "q2", "type": "written", "points": 2, "answers": [
                {"id": "w1", "content": "5", "is_correct": True},
            ]},
        ],
        "answers": [
            {"question_id": "q1", "answer": "a1"},
            {"question_id": "q2", "answer": "6"},
        ],
    }
    res = client.post(f"{API_PREFIX}/grading/submit", json=payload)
    assert res.status_code == 200
    body = res.json()
    assert body["correct_answers"] == 1
    assert body["earned_points"] == 1
    assert body["max_points"] == 3
    assert body["raw_score"] == 50
    assert body["scaled_score"] == 0


def test_scale_endpoint():
    res = client.get(f"{API_PREFIX}/grading/scale/mathematics", params={"raw": 32})
    assert res.json() == {"subject_slug": "mathematics", "raw": 32, "scaled": 200}
