"""
Health check endpoint.

Unauthenticated; used by the hosting platform's health check.
"""

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Return service liveness."""
    return {"status": "ok"}
