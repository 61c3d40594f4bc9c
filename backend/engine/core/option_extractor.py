# core/option_extractor.py
"""
Splits one question block into prompt / lettered options / numbered left items.

Option headers are only accepted in alphabet order (А, then Б, then В ...),
so a stray "В. Стус" inside the prompt does not open an option list.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from engine.core.subjects import OPTION_LETTER_CLASS, SubjectProfile

IMAGE_TOKEN_RE = re.compile(
    r"\[(?:image|img)\s*:\s*([^\]|]+?)\s*(?:\|\s*w\s*=\s*(\d+)\s*)?\]",
    re.IGNORECASE,
)
OPTION_HEADER_RE = re.compile(rf"^([{OPTION_LETTER_CLASS}])(?:[.)]|:)\s*(.*)$")
LEFT_ITEM_RE = re.compile(r"^\d{1,3}[.)]\s+\S")
_MARKER_RE = re.compile(r"^\d{1,3}[.)]\s*")
_BARE_NUMBER_RE = re.compile(r"^\d{1,6}$")


@dataclass
class ExtractedOptions:
    prompt: str
    options: List[str] = field(default_factory=list)
    option_lines_raw: List[str] = field(default_factory=list)
    left_items: List[str] = field(default_factory=list)
    image_url: Optional[str] = None
    image_width: Optional[int] = None
    # in-order headers seen before truncation to profile.max_options
    parsed_option_count: int = 0


def parse_option_header(line: str, profile: SubjectProfile, expected_index: int) -> Optional[str]:
    """Option text when `line` opens option number `expected_index`, else None."""
    m = OPTION_HEADER_RE.match(line.strip())
    if not m:
        return None
    if expected_index not in profile.candidate_indices(m.group(1)):
        return None
    return m.group(2).strip()


def extract_image(text: str) -> Tuple[str, Optional[str], Optional[int]]:
    """First image token wins; every token is removed from the text."""
    url: Optional[str] = None
    width: Optional[int] = None
    m = IMAGE_TOKEN_RE.search(text or "")
    if m:
        url = m.group(1).strip()
        width = int(m.group(2)) if m.group(2) else None
    return IMAGE_TOKEN_RE.sub("", text or ""), url, width


def extract_options(
    raw_text: str,
    profile: SubjectProfile,
    shared_options: Optional[List[str]] = None,
) -> ExtractedOptions:
    text, image_url, image_width = extract_image(raw_text)

    lines = [ln.strip() for ln in text.split("\n")]
    if lines:
        lines[0] = _MARKER_RE.sub("", lines[0], count=1)
    lines = [ln for ln in lines if ln and not _BARE_NUMBER_RE.match(ln)]

    prompt_lines: List[str] = []
    options: List[str] = []
    left_items: List[str] = []

    for i, line in enumerate(lines):
        # first line is always prompt (question marker already stripped)
        opt = parse_option_header(line, profile, len(options)) if i > 0 else None
        if opt is not None:
            options.append(opt)
            continue
        if i > 0 and LEFT_ITEM_RE.match(line):
            left_items.append(line)
            continue
        if options:
            options[-1] = f"{options[-1]} {line}".strip()
        else:
            prompt_lines.append(line)

    parsed_count = len(options)
    options = options[: profile.max_options]
    if not options and shared_options:
        options = list(shared_options[: profile.max_options])
        parsed_count = len(options)

    raw = [f"{profile.letter_at(i)}. {opt}".strip() for i, opt in enumerate(options)]

    return ExtractedOptions(
        prompt="\n".join(prompt_lines),
        options=options,
        option_lines_raw=raw,
        left_items=left_items,
        image_url=image_url,
        image_width=image_width,
        parsed_option_count=parsed_count,
    )
