# backend/engine/cli/test_run_ingest.py
import argparse
import json

import pytest

from engine.cli.run_ingest import main, parse_override
from engine.core.question_types import QuestionType


def test_parse_override():
    ov = parse_override("16-18:matching")
    assert (ov.start, ov.end, ov.type) == (16, 18, QuestionType.MATCHING)

    ov = parse_override("22:written")
    assert (ov.start, ov.end) == (22, 22)

    with pytest.raises(argparse.ArgumentTypeError):
        parse_override("x-y:written")
    with pytest.raises(argparse.ArgumentTypeError):
        parse_override("1-2:essay")


def test_main_writes_json(tmp_path):
    src = tmp_path / "exam.txt"
    src.write_text("1. What is 2+2?\nА. 3\nБ. 4\nВ. 5\nГ. 6\nВІДПОВІДІ\n1. Б", encoding="utf-8")
    out = tmp_path / "out" / "questions.json"

    assert main(["--input", str(src), "--out", str(out)]) == 0
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["questions"][0]["correct_answer"] == 1


def test_main_fails_without_key(tmp_path):
    src = tmp_path / "exam.txt"
    src.write_text("1. Питання\nА. так\nБ. ні", encoding="utf-8")
    assert main(["--input", str(src)]) == 2
