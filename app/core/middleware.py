"""
Error handling and redirect middleware
"""
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, RedirectResponse

from app.core.errors import APIError
from app.core.logging import logger
from app.services.redirects import RedirectService


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Render application errors as {error, message, details}"""
    logger.warning(
        f"API Error: {exc.error_code} {exc.message}",
        extra={
            "path": request.url.path,
            "details": exc.details,
            "status_code": exc.status_code
        }
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder({
            "error": exc.error_code,
            "message": exc.message,
            "details": exc.details
        })
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures"""
    error_response = {
        "error": "VALIDATION_ERROR",
        "message": "Invalid request data",
        "details": {
            "errors": [
                {
                    "loc": list(err.get("loc", ())),
                    "msg": err.get("msg"),
                    "type": err.get("type")
                }
                for err in exc.errors()
            ]
        }
    }
    logger.warning(
        "Validation Error",
        extra={
            "path": request.url.path,
            "details": error_response["details"]
        }
    )
    return JSONResponse(status_code=422, content=jsonable_encoder(error_response))


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unexpected Error",
        extra={
            "path": request.url.path,
            "error_type": type(exc).__name__
        }
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred"
        }
    )


async def error_logging_middleware(request: Request, call_next):
    """
    Middleware for logging all errors
    """
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception(
            "Unhandled Exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error_type": type(exc).__name__
            }
        )
        raise


def setup_error_handlers(app):
    """
    Configure error handlers for FastAPI app
    """
    app.middleware("http")(error_logging_middleware)
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)


async def redirect_middleware(request: Request, call_next):
    """
    Answer GET requests for moved storefront paths with the stored redirect
    """
    path = request.url.path
    if request.method != "GET" or path.startswith("/api/") or path in ("/docs", "/openapi.json"):
        return await call_next(request)

    try:
        redirect = await run_in_threadpool(RedirectService().find_redirect_by_path, path)
    except Exception:
        logger.exception("Redirect lookup failed", extra={"path": path})
        redirect = None

    if not redirect:
        return await call_next(request)

    location = redirect["new_path"]
    if request.url.query:
        location += ("&" if "?" in location else "?") + request.url.query
    return RedirectResponse(location, status_code=redirect.get("status_code") or 301)


def setup_redirects(app):
    app.middleware("http")(redirect_middleware)
