"""API 에러 정의"""
from fastapi import HTTPException

from engine.core.errors import IngestError


class IngestFailedError(HTTPException):
    """텍스트 파싱 실패 (답안 키 없음, 문항 없음 등)"""

    def __init__(self, error: IngestError):
        super().__init__(
            status_code=400,
            detail={"error": error.code, "message": str(error)},
        )


class TextTooLargeError(HTTPException):
    """텍스트 길이 초과"""

    def __init__(self, length: int, limit: int):
        super().__init__(
            status_code=413,
            detail={
                "error": "TEXT_TOO_LARGE",
                "message": f"텍스트가 너무 깁니다 ({length} > {limit} chars)",
            },
        )
