"""Global error handlers: every failure renders as ``{"detail", "kind", "field", ...}``."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pokerlog.errors import PokerlogError

logger = structlog.get_logger()

_HTTP_KINDS = {401: "not_authenticated", 404: "not_found", 405: "method_not_allowed", 409: "conflict"}


def _first_field(errors: list[dict]) -> str | None:
    """Name of the first offending field, skipping the ``body``/``query`` prefix."""
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        if loc:
            return ".".join(loc)
    return None


def setup_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(PokerlogError)
    async def domain_error_handler(request: Request, exc: PokerlogError) -> JSONResponse:
        """Render domain errors with their status code and kind."""
        logger.info(
            "request_failed",
            path=request.url.path,
            kind=exc.kind,
            status_code=exc.status_code,
            detail=exc.message,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "kind": _HTTP_KINDS.get(exc.status_code, "error"), "field": None},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        """Request body and query validation failures use the domain 422 shape."""
        errors = exc.errors()
        return JSONResponse(
            status_code=422,
            content={
                "detail": "Validation error",
                "kind": "validation_error",
                "field": _first_field(errors),
                "errors": [{"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in errors],
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unhandled exceptions, always JSON."""
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "kind": "internal_error", "field": None},
        )
