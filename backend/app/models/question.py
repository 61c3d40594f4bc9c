"""Question 모델 (type 으로 구분되는 union)"""
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator


class _QuestionBase(BaseModel):
    text: str
    image_url: Optional[str] = None
    image_width: Optional[int] = None


class SingleChoiceQuestion(_QuestionBase):
    """단일 선택 (정답 = 옵션 인덱스)"""
    type: Literal["single_choice"] = "single_choice"
    options: List[str] = Field(..., min_length=2)
    correct_answer: int = Field(..., ge=0)

    @model_validator(mode="after")
    def validate_index(self):
        if self.correct_answer >= len(self.options):
            raise ValueError("correct_answer가 options 범위를 벗어났습니다")
        return self


class MultipleAnswersQuestion(_QuestionBase):
    """복수 선택 (정답 = 옵션 인덱스 목록)"""
    type: Literal["multiple_answers"] = "multiple_answers"
    options: List[str] = Field(..., min_length=2)
    correct_answer: List[int]

    @model_validator(mode="after")
    def validate_indices(self):
        if any(i < 0 or i >= len(self.options) for i in self.correct_answer):
            raise ValueError("correct_answer가 options 범위를 벗어났습니다")
        return self


class SelectThreeQuestion(_QuestionBase):
    """7개 중 3개 선택 (정답 = "1".."7")"""
    type: Literal["select_three"] = "select_three"
    options: List[str] = Field(..., min_length=2)
    correct_answer: List[str]

    @model_validator(mode="after")
    def validate_positions(self):
        for pos in self.correct_answer:
            if not pos.isdigit() or not 1 <= int(pos) <= len(self.options):
                raise ValueError("correct_answer가 options 범위를 벗어났습니다")
        return self


class MatchingQuestion(_QuestionBase):
    """연결형 (정답 = 행별 글자)"""
    type: Literal["matching"] = "matching"
    # 와이어 포맷 호환용 (항상 빈 목록)
    options: List[str] = Field(default_factory=list, max_length=0)
    correct_answer: List[str]


class WrittenQuestion(_QuestionBase):
    """서술형 (정답 = 텍스트)"""
    type: Literal["written"] = "written"
    options: List[str] = Field(default_factory=list, max_length=0)
    correct_answer: str


Question = Annotated[
    Union[
        SingleChoiceQuestion,
        MultipleAnswersQuestion,
        SelectThreeQuestion,
        MatchingQuestion,
        WrittenQuestion,
    ],
    Field(discriminator="type"),
]
