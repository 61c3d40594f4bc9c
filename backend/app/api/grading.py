"""Grading API"""
import logging

from fastapi import APIRouter, Body, HTTPException, Query

from app.models.grading import (
    CheckRequest,
    CheckResponse,
    ScaleResponse,
    SubmitRequest,
    SubmitResponse,
)
from app.services.grading_service import GradingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/grading", tags=["grading"])


@router.post("/check", response_model=CheckResponse)
async def check_answer(body: CheckRequest = Body(...)):
    """
    단일 문항 채점

    - **type**: 문항 유형
    - **user_answer**: 제출 답안 (문자열 또는 목록)
    - **correct_answers**: 비교 가능한 정답 목록
    """
    return GradingService.check(body)


@router.post("/submit", response_model=SubmitResponse)
async def submit_test(body: SubmitRequest = Body(...)):
    """시험 제출 채점 (총점, 백분율, NMT 환산 점수)"""
    try:
        return GradingService.submit(body)
    except Exception:
        logger.exception("[GRADING] unexpected failure")
        raise HTTPException(
            status_code=500,
            detail={"error": "GRADING_FAILED", "message": "채점 중 서버 오류가 발생했습니다."}
        )


@router.get("/scale/{subject_slug}", response_model=ScaleResponse)
async def nmt_scale(subject_slug: str, raw: int = Query(..., ge=0)):
    """원점수(정답 수) → NMT 100~200 환산"""
    return GradingService.scale(subject_slug, raw)
