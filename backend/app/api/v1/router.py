"""API v1 main router - aggregates all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import links

api_router = APIRouter()

api_router.include_router(links.router, prefix="/links", tags=["links"])
