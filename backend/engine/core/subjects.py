# core/subjects.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from engine.core.question_types import QuestionType

# =========================
# Option alphabets
# =========================

CYRILLIC_LETTERS = "АБВГДЕЄЖ"
LATIN_LETTERS = "ABCDEFGH"

# OCR/copy often swaps look-alike glyphs between scripts
LATIN_TO_CYRILLIC = {
    "A": "А", "B": "В", "C": "С", "E": "Е", "H": "Н", "I": "І",
    "K": "К", "M": "М", "O": "О", "P": "Р", "T": "Т", "X": "Х",
}
CYRILLIC_TO_LATIN = {v: k for k, v in LATIN_TO_CYRILLIC.items()}

# any capital a header/key may use
OPTION_LETTER_CLASS = "A-ZА-ЯІЇЄҐ"


@dataclass(frozen=True)
class TypeOverride:
    """Forces question numbers start..end (inclusive) to a type."""
    start: int
    end: int
    type: QuestionType

    def covers(self, number: int) -> bool:
        return self.start <= number <= self.end


@dataclass(frozen=True)
class SubjectProfile:
    slug: str
    letters: str = CYRILLIC_LETTERS

    # strict: only the profile alphabet (plus homoglyphs) may head an option
    strict_alphabet: bool = False
    max_options: int = 7

    # inside a matching block, numbered lines up to this value are left-column rows
    matching_guard_rows: int = 4

    # official numbering layout (enabled per call)
    nmt_layout: Tuple[TypeOverride, ...] = ()

    def letter_index(self, letter: str) -> Optional[int]:
        ch = (letter or "").strip().upper()[:1]
        if not ch:
            return None
        if ch in self.letters:
            return self.letters.index(ch)

        fold = LATIN_TO_CYRILLIC if self.letters == CYRILLIC_LETTERS else CYRILLIC_TO_LATIN
        folded = fold.get(ch)
        if folded and folded in self.letters:
            return self.letters.index(folded)

        if self.strict_alphabet:
            return None
        other = LATIN_LETTERS if self.letters == CYRILLIC_LETTERS else CYRILLIC_LETTERS
        if ch in other:
            return other.index(ch)
        return None

    def candidate_indices(self, letter: str) -> List[int]:
        """Every index `letter` may stand for (homoglyph B/В is both 1 and 2 in a Cyrillic test)."""
        ch = (letter or "").strip().upper()[:1]
        out: List[int] = []
        first = self.letter_index(ch)
        if first is not None:
            out.append(first)
        if not self.strict_alphabet:
            other = LATIN_LETTERS if self.letters == CYRILLIC_LETTERS else CYRILLIC_LETTERS
            if ch and ch in other and other.index(ch) not in out:
                out.append(other.index(ch))
        return out

    def letter_at(self, index: int) -> str:
        if 0 <= index < len(self.letters):
            return self.letters[index]
        return str(index + 1)


PROFILES: Dict[str, SubjectProfile] = {
    "mathematics": SubjectProfile(
        slug="mathematics",
        strict_alphabet=True,
        nmt_layout=(
            TypeOverride(16, 18, QuestionType.MATCHING),
            TypeOverride(19, 22, QuestionType.WRITTEN),
        ),
    ),
    "ukrainian-language": SubjectProfile(
        slug="ukrainian-language",
        nmt_layout=(TypeOverride(26, 30, QuestionType.MATCHING),),
    ),
    "history-ukraine": SubjectProfile(
        slug="history-ukraine",
        nmt_layout=(
            TypeOverride(21, 27, QuestionType.MATCHING),
            TypeOverride(28, 30, QuestionType.SELECT_THREE),
        ),
    ),
    "english-language": SubjectProfile(
        slug="english-language",
        letters=LATIN_LETTERS,
    ),
}

DEFAULT_PROFILE = SubjectProfile(slug="default")


def get_profile(slug: Optional[str]) -> SubjectProfile:
    return PROFILES.get((slug or "").strip().lower(), DEFAULT_PROFILE)


def forced_type(number: int, overrides: Iterable[TypeOverride]) -> Optional[QuestionType]:
    """First override covering `number` wins."""
    for ov in overrides:
        if ov.covers(number):
            return ov.type
    return None
