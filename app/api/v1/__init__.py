"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import auth, health, moderators, posts, subforums

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, tags=["auth"])
router.include_router(subforums.router, prefix="/subforums", tags=["subforums"])
router.include_router(posts.router, prefix="/posts", tags=["posts"])
router.include_router(moderators.router, prefix="/moderators", tags=["moderators"])
