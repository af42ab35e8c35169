"""API router configuration."""

from fastapi import APIRouter

from src.modules.streams.interfaces.router import router as streams_router

api_router = APIRouter()

api_router.include_router(streams_router)
