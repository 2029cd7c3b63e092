"""API v1 router combining all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import attribution, documents

api_router = APIRouter()

api_router.include_router(
    attribution.router, prefix="/attribution", tags=["attribution"]
)
api_router.include_router(documents.router, prefix="/documents", tags=["documents"])
