"""
Exception Handlers

Turn HTTP errors and domain exceptions into consistent JSON error bodies.
"""

import logging
from typing import Union

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.components.exceptions import ComponentStoreException
from stagecraft.exceptions import ScriptSynthesisError

logger = logging.getLogger(__name__)


def _request_id(request: Request):
    return getattr(request.state, "request_id", None)


async def not_found_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle 404 Not Found errors."""
    return JSONResponse(
        status_code=404,
        content={
            "success": False,
            "error": "Not Found",
            "message": getattr(exc, "detail", "The requested resource was not found"),
            "request_id": _request_id(request),
        }
    )


async def method_not_allowed_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle 405 Method Not Allowed errors."""
    return JSONResponse(
        status_code=405,
        content={
            "success": False,
            "error": "Method Not Allowed",
            "message": f"Method {request.method} not allowed",
            "status_code": 405
        }
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle 422 request validation errors."""
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": "Unprocessable Entity",
            "message": "Validation error",
            "details": jsonable_errors(exc),
            "request_id": _request_id(request),
        }
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may hold exception instances that are not JSON serializable
    return [
        {key: value for key, value in error.items() if key != "ctx"}
        for error in exc.errors()
    ]


async def generic_http_exception_handler(
    request: Request,
    exc: Union[HTTPException, StarletteHTTPException],
) -> JSONResponse:
    """Generic handler for other HTTP exceptions."""
    status_code = exc.status_code
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": f"HTTP {status_code}",
            "message": getattr(exc, "detail", f"HTTP {status_code} error"),
            "status_code": status_code
        },
        headers=getattr(exc, "headers", None),
    )


async def script_synthesis_exception_handler(request: Request, exc: ScriptSynthesisError) -> JSONResponse:
    """Workflows that cannot be turned into a script are client errors."""
    logger.info(f"Script generation rejected: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.__class__.__name__,
            "message": exc.message,
            "details": exc.details,
            "request_id": _request_id(request),
        }
    )


async def component_store_exception_handler(request: Request, exc: ComponentStoreException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.__class__.__name__,
            "message": exc.message,
            "details": exc.details,
            "request_id": _request_id(request),
        }
    )
