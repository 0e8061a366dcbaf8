"""API v1 router - includes all v1 endpoints."""

from fastapi import APIRouter

from testhub.api.v1.endpoints import health, submissions, subscriptions

api_router = APIRouter()

api_router.include_router(health.router, prefix="", tags=["Health"])
api_router.include_router(submissions.router, prefix="", tags=["Solutions"])
api_router.include_router(subscriptions.router, prefix="/subscription", tags=["Subscription"])
