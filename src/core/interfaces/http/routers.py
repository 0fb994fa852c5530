"""API router configuration."""

from fastapi import APIRouter

from src.modules.posts.interfaces.router import router as posts_router

api_router = APIRouter()

# Posts
api_router.include_router(posts_router)
