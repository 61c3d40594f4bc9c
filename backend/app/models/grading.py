"""Grading 모델"""
from typing import List, Optional, Union

from pydantic import BaseModel, Field

AnswerIn = Union[List[str], str, None]


class CheckRequest(BaseModel):
    """단일 문항 채점 요청"""
    type: str
    user_answer: AnswerIn = None
    correct_answers: List[str] = Field(default_factory=list)
    points: Optional[float] = None


class CheckResponse(BaseModel):
    """단일 문항 채점 결과"""
    is_correct: bool
    partial_credit: bool
    points: float


class AnswerRow(BaseModel):
    """저장된 답안 행"""
    id: Optional[str] = None
    content: Optional[str] = None
    is_correct: bool = False
    order: Optional[int] = None
    matching_pair: Optional[str] = None


class SubmitQuestion(BaseModel):
    id: str
    type: str
    points: Optional[float] = None
    answers: List[AnswerRow] = Field(default_factory=list)


class SubmittedAnswer(BaseModel):
    question_id: str
    answer: AnswerIn = None


class SubmitRequest(BaseModel):
    """시험 제출 채점 요청"""
    test_type: Optional[str] = None
    subject_slug: Optional[str] = None
    questions: List[SubmitQuestion]
    answers: List[SubmittedAnswer]


class QuestionResult(BaseModel):
    question_id: str
    is_correct: bool
    partial_credit: bool
    points: float
    max_points: float


class SubmitResponse(BaseModel):
    """제출 채점 결과"""
    correct_answers: int
    total_questions: int
    raw_score: int
    earned_points: float
    max_points: float
    percentage: float
    scaled_score: float
    details: List[QuestionResult]


class ScaleResponse(BaseModel):
    """NMT 환산 결과"""
    subject_slug: str
    raw: int
    scaled: int
