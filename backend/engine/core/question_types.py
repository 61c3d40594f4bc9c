# core/question_types.py
"""
Typed question records produced by ingestion and consumed by grading.

Each variant carries only the fields its type needs:
  - single_choice     options=[letters], correct_answer=int (index)
  - multiple_answers  options=[letters], correct_answer=[int, ...]
  - select_three      options=[7 texts], correct_answer=["1".."7", ...]
  - matching          correct_answer=[letter per row]
  - written           correct_answer=str
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class QuestionType(str, Enum):
    SINGLE_CHOICE = "single_choice"
    MULTIPLE_ANSWERS = "multiple_answers"
    WRITTEN = "written"
    MATCHING = "matching"
    SELECT_THREE = "select_three"

    @classmethod
    def parse(cls, value: Any) -> Optional["QuestionType"]:
        if isinstance(value, cls):
            return value
        s = str(value or "").strip().lower()
        for t in cls:
            if t.value == s:
                return t
        return None


class _QuestionBase:
    type: QuestionType

    def to_dict(self) -> Dict[str, Any]:
        # written/matching still emit an empty options list (flat wire format)
        return {
            "type": self.type.value,
            "text": self.text,
            "image_url": self.image_url,
            "image_width": self.image_width,
            "options": list(getattr(self, "options", [])),
            "correct_answer": self.correct_answer,
        }


@dataclass
class SingleChoiceQuestion(_QuestionBase):
    text: str
    options: List[str]
    correct_answer: int
    image_url: Optional[str] = None
    image_width: Optional[int] = None
    type: QuestionType = field(default=QuestionType.SINGLE_CHOICE, init=False)


@dataclass
class MultipleAnswersQuestion(_QuestionBase):
    text: str
    options: List[str]
    correct_answer: List[int]
    image_url: Optional[str] = None
    image_width: Optional[int] = None
    type: QuestionType = field(default=QuestionType.MULTIPLE_ANSWERS, init=False)


@dataclass
class SelectThreeQuestion(_QuestionBase):
    text: str
    options: List[str]
    correct_answer: List[str]
    image_url: Optional[str] = None
    image_width: Optional[int] = None
    type: QuestionType = field(default=QuestionType.SELECT_THREE, init=False)


@dataclass
class MatchingQuestion(_QuestionBase):
    text: str
    correct_answer: List[str]
    image_url: Optional[str] = None
    image_width: Optional[int] = None
    type: QuestionType = field(default=QuestionType.MATCHING, init=False)


@dataclass
class WrittenQuestion(_QuestionBase):
    text: str
    correct_answer: str
    image_url: Optional[str] = None
    image_width: Optional[int] = None
    type: QuestionType = field(default=QuestionType.WRITTEN, init=False)


Question = Union[
    SingleChoiceQuestion,
    MultipleAnswersQuestion,
    SelectThreeQuestion,
    MatchingQuestion,
    WrittenQuestion,
]
