"""API 라우터 모음"""
from fastapi import APIRouter
from app.api import ingest, grading

api_router = APIRouter()
api_router.include_router(ingest.router)
api_router.include_router(grading.router)
