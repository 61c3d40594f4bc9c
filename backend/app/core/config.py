"""환경 설정 (.env → os.getenv)"""
import os

# API 프리픽스
API_PREFIX = os.getenv("API_PREFIX", "/api/v1")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# 붙여넣기 텍스트 최대 길이 (문자 수)
MAX_TEXT_CHARS = int(os.getenv("MAX_TEXT_CHARS", "400000"))

# subject 미지정 요청의 기본 과목
DEFAULT_SUBJECT = os.getenv("DEFAULT_SUBJECT", "ukrainian-language")
