# backend/engine/cli/run_ingest.py
"""
텍스트 파일 → 문항 JSON 변환 (배치 실행용)

  python -m engine.cli.run_ingest --input exam.txt --subject mathematics --nmt_layout --out questions.json
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Tuple

from engine.core.errors import IngestError
from engine.core.ingestion import IngestConfig, parse_exam_text
from engine.core.question_types import QuestionType
from engine.core.subjects import TypeOverride

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def parse_override(value: str) -> TypeOverride:
    """'16-18:matching' / '22:written'"""
    try:
        span, type_name = value.split(":", 1)
        if "-" in span:
            a, b = span.split("-", 1)
            start, end = int(a), int(b)
        else:
            start = end = int(span)
    except ValueError:
        raise argparse.ArgumentTypeError(f"bad override '{value}' (expected START-END:type)") from None

    qtype = QuestionType.parse(type_name)
    if qtype is None:
        raise argparse.ArgumentTypeError(f"unknown question type '{type_name}'")
    return TypeOverride(start=min(start, end), end=max(start, end), type=qtype)


def run(
    input_path: Path,
    subject: str,
    use_nmt_layout: bool,
    overrides: Tuple[TypeOverride, ...],
    out_path: Path = None,
) -> int:
    text = input_path.read_text(encoding="utf-8")
    cfg = IngestConfig(subject=subject, use_nmt_layout=use_nmt_layout, overrides=overrides)

    try:
        result = parse_exam_text(text, cfg)
    except IngestError as e:
        logger.error(f"[INGEST] {e.code}: {e}")
        return 2

    payload = result.to_dict()
    body = json.dumps(payload, ensure_ascii=False, indent=2)
    if out_path:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(body, encoding="utf-8")
        logger.info(f"✅ saved {len(result.questions)} questions → {out_path}")
    else:
        sys.stdout.write(body + "\n")

    if result.warnings:
        logger.info(f"⚠️  warnings: {len(result.warnings)}")
    return 0


def main(argv: List[str] = None) -> int:
    ap = argparse.ArgumentParser(description="시험 텍스트 → 문항 JSON")
    ap.add_argument("--input", required=True, help="UTF-8 텍스트 파일")
    ap.add_argument("--subject", default="", help="과목 slug (mathematics, history-ukraine, ...)")
    ap.add_argument("--nmt_layout", action="store_true", help="과목 기본 NMT 번호 배치 적용")
    ap.add_argument(
        "--override",
        action="append",
        type=parse_override,
        default=[],
        help="번호 범위 유형 고정 (예: 16-18:matching), 반복 가능",
    )
    ap.add_argument("--out", default="", help="출력 JSON 경로 (생략 시 stdout)")

    args = ap.parse_args(argv)

    return run(
        input_path=Path(args.input),
        subject=args.subject or None,
        use_nmt_layout=args.nmt_layout,
        overrides=tuple(args.override),
        out_path=Path(args.out) if args.out else None,
    )


if __name__ == "__main__":
    sys.exit(main())
