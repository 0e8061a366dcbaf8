"""Health and readiness endpoints."""

from typing import Literal

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.orm import Session

from testhub.core.errors import get_request_id
from testhub.core.logging import get_logger
from testhub.db.session import get_db

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["ok"] = "ok"


class ReadinessCheck(BaseModel):
    """Individual readiness check result."""

    status: Literal["ok", "down"]
    message: str | None = None


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    status: Literal["ok", "down"]
    checks: dict[str, ReadinessCheck]
    request_id: str


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health_check() -> HealthResponse:
    """Process is alive."""
    return HealthResponse(status="ok")


@router.get("/ready", response_model=ReadinessResponse, summary="Readiness check")
def readiness_check(request: Request, db: Session = Depends(get_db)):
    """Database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        database = ReadinessCheck(status="ok")
    except Exception as e:
        logger.warning("Readiness database check failed", extra={"error": str(e)})
        database = ReadinessCheck(status="down", message=type(e).__name__)

    overall = "ok" if database.status == "ok" else "down"
    body = ReadinessResponse(
        status=overall,
        checks={"database": database},
        request_id=get_request_id(request),
    )
    code = status.HTTP_200_OK if overall == "ok" else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(status_code=code, content=body.model_dump())
