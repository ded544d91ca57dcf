"""
Service probes.

/health answers as long as the process is up; /ready also round-trips the
catalog store and reports 503 while it is unreachable.
"""

import logging
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cardmarket.config import settings
from cardmarket.db.database import get_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class ProbeResponse(BaseModel):
    """Probe result. `database` is only reported by the readiness probe."""

    service: str = settings.app_name
    status: Literal["healthy", "ready", "not ready"]
    database: Literal["connected", "disconnected"] | None = None


@router.get("/health", response_model=ProbeResponse)
async def liveness() -> ProbeResponse:
    return ProbeResponse(status="healthy")


@router.get(
    "/ready",
    response_model=ProbeResponse,
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ProbeResponse}},
)
async def readiness(
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ProbeResponse:
    """Report whether the catalog store accepts queries."""
    try:
        await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Catalog store unreachable: %s", e)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ProbeResponse(status="not ready", database="disconnected")
    return ProbeResponse(status="ready", database="connected")
