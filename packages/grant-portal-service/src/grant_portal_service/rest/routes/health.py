"""Health check endpoints."""

import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from grant_portal_service.db.deps import SessionDep

log = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready")
async def ready(session: SessionDep):
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        log.warning("readiness_check_failed", error=str(exc))
        return JSONResponse({"status": "unavailable"}, status_code=503)
    return {"status": "ready"}
