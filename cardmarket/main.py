import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cardmarket.api import cards_router, health_router, listings_router
from cardmarket.config import settings
from cardmarket.db.database import init_db
from cardmarket.models.failure import (
    FailureKind,
    FailureResponse,
    KnownError,
    ValidationError,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    await init_db()
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("cardmarket"),
    lifespan=lifespan,
)

app.include_router(cards_router)
app.include_router(listings_router)
app.include_router(health_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "Authorization", "X-User-Id"],
)


@app.middleware("http")
async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    logger.info("Request received: %s %s", request.method, request.url.path)
    return await call_next(request)


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    """Translate core failures into a status code and a FailureDetail body."""
    if exc.status_code >= 500:
        logger.error("Request failed: %s (%s)", exc.message, exc.detail)
    body = FailureResponse(failure=exc.to_detail())
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


_RANGE_ERROR_TYPES = {"greater_than", "greater_than_equal", "less_than", "less_than_equal"}


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed path, query, header or body input as a 400 ValidationError."""
    first = exc.errors()[0]
    if first["type"] == "missing":
        kind = FailureKind.MISSING_REQUIRED
    elif first["type"] in _RANGE_ERROR_TYPES:
        kind = FailureKind.OUT_OF_RANGE
    else:
        kind = FailureKind.INVALID_INPUT
    field = str(first["loc"][-1]) if first["loc"] else None
    error = ValidationError(first["msg"], field=field, kind=kind)
    return await known_error_handler(request, error)
