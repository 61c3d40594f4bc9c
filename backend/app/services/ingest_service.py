"""Ingest 서비스"""
import logging

from app.core.config import DEFAULT_SUBJECT, MAX_TEXT_CHARS
from app.core.errors import IngestFailedError, TextTooLargeError
from app.models.ingest import IngestRequest, IngestResponse
from engine.core.errors import IngestError
from engine.core.ingestion import IngestConfig, parse_exam_text
from engine.core.question_types import QuestionType
from engine.core.subjects import TypeOverride

logger = logging.getLogger(__name__)


class IngestService:
    """시험 텍스트 → 문항 변환 서비스"""

    @staticmethod
    def build_config(req: IngestRequest) -> IngestConfig:
        overrides = tuple(
            TypeOverride(start=o.start, end=o.end, type=QuestionType(o.type))
            for o in req.overrides
        )
        return IngestConfig(
            subject=req.subject or DEFAULT_SUBJECT,
            use_nmt_layout=req.use_nmt_layout,
            overrides=overrides,
            existing_count=req.existing_count,
        )

    @staticmethod
    def ingest(req: IngestRequest) -> IngestResponse:
        """텍스트 파싱 (치명적 오류는 400)"""
        if len(req.text) > MAX_TEXT_CHARS:
            raise TextTooLargeError(len(req.text), MAX_TEXT_CHARS)

        cfg = IngestService.build_config(req)
        try:
            result = parse_exam_text(req.text, cfg)
        except IngestError as e:
            logger.info(f"[INGEST] rejected: {e.code}")
            raise IngestFailedError(e) from e

        return IngestResponse.model_validate(result.to_dict())
