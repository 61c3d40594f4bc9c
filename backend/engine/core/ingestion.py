# core/ingestion.py
"""
Pasted exam text -> typed questions + advisory warnings.

Pipeline:
  normalize_text -> segment_text -> parse_answer_key
  -> per block: extract_options -> classify_question

Fatal problems raise IngestError subclasses; everything else becomes a warning
keyed by the question's 1-based position in the caller's list.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from engine.core.answer_key import parse_answer_key
from engine.core.classifier import classify_question
from engine.core.errors import EmptyInputError, NoQuestionsError
from engine.core.normalizer import normalize_text
from engine.core.option_extractor import extract_options
from engine.core.question_types import Question
from engine.core.segmenter import ParsedBlock, SharedOptionGroup, segment_text
from engine.core.subjects import TypeOverride, get_profile

logger = logging.getLogger(__name__)

WARNING_SEPARATOR = " · "
WARN_UNMAPPED_GROUP = "shared option group not attached to any question"


# =========================
# Config / Result
# =========================

@dataclass(frozen=True)
class IngestConfig:
    subject: Optional[str] = None
    use_nmt_layout: bool = False
    # caller overrides win over the built-in layout
    overrides: Tuple[TypeOverride, ...] = ()
    # questions already in the caller's list (append mode)
    existing_count: int = 0

    def effective_overrides(self) -> Tuple[TypeOverride, ...]:
        layout = get_profile(self.subject).nmt_layout if self.use_nmt_layout else ()
        return tuple(self.overrides) + tuple(layout)


@dataclass
class IngestResult:
    questions: List[Question]
    warnings: Dict[int, str] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "questions": [q.to_dict() for q in self.questions],
            "warnings": {str(k): v for k, v in sorted(self.warnings.items())},
            "meta": dict(self.meta),
        }


# =========================
# Shared-group cursor
# =========================

def _assign_shared_groups(
    blocks: Sequence[ParsedBlock],
    groups: Sequence[SharedOptionGroup],
    own_options: Sequence[bool],
) -> Tuple[List[Optional[SharedOptionGroup]], List[int]]:
    """
    Cursor walks forward only: a block sees the latest group printed before it.
    A group without a question range covers only the run of option-less blocks
    right after it; the first block with its own options closes it.
    Returns (group per block, indices of groups never attached).
    """
    assigned: List[Optional[SharedOptionGroup]] = []
    used = set()
    cursor = -1
    closed = False
    for block, has_own in zip(blocks, own_options):
        while cursor + 1 < len(groups) and groups[cursor + 1].line_index < block.line_index:
            cursor += 1
            closed = False
        group = groups[cursor] if cursor >= 0 else None
        if group is not None and group.start is None and has_own:
            closed = True
        if group is None or has_own or closed or not group.allows(block.question_number):
            group = None
        assigned.append(group)
        if group is not None:
            used.add(cursor)
    unused = [i for i in range(len(groups)) if i not in used]
    return assigned, unused


def _add_warning(bucket: Dict[int, List[str]], key: int, message: str) -> None:
    bucket.setdefault(key, []).append(message)


# =========================
# Public
# =========================

def parse_exam_text(text: str, config: Optional[IngestConfig] = None) -> IngestResult:
    cfg = config or IngestConfig()
    if not (text or "").strip():
        raise EmptyInputError()

    profile = get_profile(cfg.subject)
    overrides = cfg.effective_overrides()

    normalized = normalize_text(text)
    seg = segment_text(normalized, profile)
    key_map = parse_answer_key(seg.key_lines)
    if not seg.blocks:
        raise NoQuestionsError()

    logger.info(
        f"[INGEST] subject={profile.slug} blocks={len(seg.blocks)} keys={len(key_map)} "
        f"shared_groups={len(seg.shared_groups)}"
    )

    extracted = [extract_options(b.raw_text, profile) for b in seg.blocks]
    assigned, unused_groups = _assign_shared_groups(
        seg.blocks, seg.shared_groups, [bool(ex.options) for ex in extracted]
    )

    questions: List[Question] = []
    pending: Dict[int, List[str]] = {}
    missing_answers = 0

    for idx, block in enumerate(seg.blocks):
        list_index = idx + 1 + cfg.existing_count
        group = assigned[idx]
        ex = extract_options(block.raw_text, profile, group.options) if group else extracted[idx]

        token = key_map.get(block.question_number, "")
        if block.question_number not in key_map:
            missing_answers += 1

        question, warnings = classify_question(block.question_number, ex, token, profile, overrides)
        questions.append(question)
        for w in warnings:
            _add_warning(pending, list_index, w)

    for gi in unused_groups:
        line_index = seg.shared_groups[gi].line_index
        target = next(
            (i for i, b in enumerate(seg.blocks) if b.line_index > line_index),
            len(seg.blocks) - 1,
        )
        _add_warning(pending, target + 1 + cfg.existing_count, WARN_UNMAPPED_GROUP)

    warnings_map = {k: WARNING_SEPARATOR.join(v) for k, v in pending.items()}
    for k, msg in sorted(warnings_map.items()):
        number = seg.blocks[k - 1 - cfg.existing_count].question_number
        logger.warning(f"[INGEST] question #{number} (list index {k}): {msg}")

    meta = {
        "subject": profile.slug,
        "question_numbers": [b.question_number for b in seg.blocks],
        "answer_keys": len(key_map),
        "missing_answers": missing_answers,
        "shared_groups": len(seg.shared_groups),
        "overrides_applied": len(overrides),
    }
    return IngestResult(questions=questions, warnings=warnings_map, meta=meta)
