"""
API Router
"""

from fastapi import APIRouter

from app.api.v1 import archived_reviews, classification, dashboard, reviews, wip_reviews

router = APIRouter()

# Include all endpoint routers
router.include_router(reviews.router)
router.include_router(archived_reviews.router)
router.include_router(classification.router)
router.include_router(dashboard.router)
router.include_router(wip_reviews.router)

__all__ = ["router"]
