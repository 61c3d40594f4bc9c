"""FastAPI 메인 애플리케이션"""
import logging
from pathlib import Path
from dotenv import load_dotenv

# .env 파일 로드 (backend 디렉토리 기준)
env_path = Path(__file__).resolve().parents[1] / ".env"
load_dotenv(dotenv_path=env_path)

from fastapi import FastAPI
from app.api import api_router
from app.core.config import API_PREFIX, LOG_LEVEL

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)

app = FastAPI(
    title="NMT Exam Engine API",
    description="시험 텍스트 파싱 및 채점 API",
    version="1.0.0"
)

app.include_router(api_router, prefix=API_PREFIX)


@app.get("/")
async def root():
    """루트 엔드포인트"""
    return {"message": "NMT Exam Engine API"}


@app.get("/health")
async def health():
    """헬스 체크"""
    return {"status": "ok"}
