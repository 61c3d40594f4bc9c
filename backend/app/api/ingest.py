"""Ingest API"""
import logging

from fastapi import APIRouter, Body, HTTPException

from app.models.ingest import IngestRequest, IngestResponse
from app.services.ingest_service import IngestService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ingest", tags=["ingest"])


@router.post("", response_model=IngestResponse)
async def ingest_exam_text(body: IngestRequest = Body(...)):
    """
    붙여넣은 시험 텍스트 → 문항 목록

    - **text**: 문항 + 답안 키(ВІДПОВІДІ / ANSWERS)를 포함한 텍스트
    - **subject**: 과목 slug (옵션 글자/NMT 번호 배치 결정)
    - **use_nmt_layout**: 과목 기본 번호 배치 적용 여부
    - **overrides**: 번호 범위 유형 고정
    - **existing_count**: append 모드 시 기존 문항 수
    """
    try:
        return IngestService.ingest(body)
    except HTTPException:
        raise
    except Exception:
        logger.exception("[INGEST] unexpected failure")
        raise HTTPException(
            status_code=500,
            detail={"error": "INGEST_FAILED", "message": "텍스트 처리 중 서버 오류가 발생했습니다."}
        )
