"""API router."""
from fastapi import APIRouter

from pdfshare.api.routes import auth, comments, documents, public, settings

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(documents.router, prefix="/documents", tags=["Documents"])
api_router.include_router(public.router, prefix="/public", tags=["Public Access"])
api_router.include_router(comments.router, prefix="/comments", tags=["Comments"])
api_router.include_router(settings.router, prefix="/settings", tags=["Settings"])
