"""Ingest 모델"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from app.models.question import Question


class TypeOverrideIn(BaseModel):
    """번호 범위 유형 고정 (start..end 포함)"""
    start: int = Field(..., ge=1)
    end: int = Field(..., ge=1)
    type: Literal["single_choice", "multiple_answers", "written", "matching", "select_three"]

    @model_validator(mode="after")
    def validate_range(self):
        if self.end < self.start:
            raise ValueError("end는 start 이상이어야 합니다")
        return self


class IngestRequest(BaseModel):
    """시험 텍스트 파싱 요청"""
    text: str
    subject: Optional[str] = None
    use_nmt_layout: bool = False
    overrides: List[TypeOverrideIn] = Field(default_factory=list)
    # append 모드: 기존 목록 길이만큼 warnings 키를 밀어줌
    existing_count: int = Field(0, ge=0)


class IngestResponse(BaseModel):
    """파싱 결과"""
    questions: List[Question]
    warnings: Dict[int, str] = Field(default_factory=dict)
    meta: Dict[str, Any] = Field(default_factory=dict)
