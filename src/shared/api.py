"""FastAPI glue shared by all routers.

Pushes the storefront domain context around every request and translates
domain exceptions into JSON responses.
"""

from uuid import uuid4

import structlog
from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import (
    DatabaseError,
    ExpectedVersionError,
    ObjectNotFoundError,
    TransactionError,
    ValidationError,
)

from shared.config import get_settings
from shared.domain import storefront
from shared.errors import ErrorKind, error_kind, error_payload, status_code_for
from shared.logging import add_context, clear_context

logger = structlog.get_logger(__name__)

health_router = APIRouter(tags=["health"])


@health_router.get("/health")
async def health() -> JSONResponse:
    healthy = storefront.providers["default"].is_alive()
    if not healthy:
        logger.warning("Health check failed: database unreachable")
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "ok" if healthy else "degraded",
            "store": get_settings().store_name,
            "domain": storefront.name,
            "database": "ok" if healthy else "unavailable",
        },
    )


def install_domain_context(app: FastAPI) -> None:
    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the storefront domain context and tag log lines with the request id and path."""
        request_id = request.headers.get("X-Request-ID") or uuid4().hex[:12]
        clear_context()
        add_context(request_id=request_id, path=request.url.path)
        try:
            with storefront.domain_context():
                response = await call_next(request)
        finally:
            clear_context()
        response.headers["X-Request-ID"] = request_id
        return response


def register_exception_handlers(app: FastAPI) -> None:
    """Every domain failure becomes ``{"error": KIND, "messages": {...}}`` with the kind's status code."""

    async def _domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
        kind = error_kind(exc)
        if kind == ErrorKind.INTERNAL:
            logger.error(
                "Request failed",
                path=request.url.path,
                error_type=type(exc).__name__,
            )
        return JSONResponse(status_code=status_code_for(kind), content=error_payload(exc))

    for exc_class in (
        ValidationError,
        ObjectNotFoundError,
        ExpectedVersionError,
        TransactionError,
        DatabaseError,
    ):
        app.add_exception_handler(exc_class, _domain_error_handler)

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Malformed bodies report the same kind as domain validation failures
        messages: dict[str, list[str]] = {}
        for error in exc.errors():
            field = ".".join(str(part) for part in error.get("loc", ()) if part != "body") or "_entity"
            messages.setdefault(field, []).append(error.get("msg", "Invalid value"))
        return JSONResponse(
            status_code=status_code_for(ErrorKind.VALIDATION_ERROR),
            content={"error": ErrorKind.VALIDATION_ERROR.value, "messages": messages},
        )
