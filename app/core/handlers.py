"""Exception handlers: every failure leaves as {"message": ...} JSON."""
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import InnerFlameError

logger = structlog.get_logger()


def _first_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid data"
    err = errors[0]
    where = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
    return f"{where}: {err.get('msg', 'invalid')}" if where else err.get("msg", "Invalid data")


def setup_error_handlers(app: FastAPI) -> None:
    """Register exception handlers on the app."""

    @app.exception_handler(InnerFlameError)
    async def domain_exception_handler(request: Request, exc: InnerFlameError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("request_failed", path=request.url.path, method=request.method, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"message": _first_error(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"message": "Internal server error"})
