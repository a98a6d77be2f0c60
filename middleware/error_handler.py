"""
Error Handling Middleware

Assigns every request an id and turns uncaught exceptions into a JSON 500.
"""

import logging
import uuid
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle uncaught exceptions and standardize error responses.

    An incoming ``X-Request-ID`` header is reused so callers can correlate
    their own logs; otherwise a fresh UUID is generated.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Unhandled exception in request %s %s %s: %s",
                request_id,
                request.method,
                request.url.path,
                exc,
                exc_info=True,
            )
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "message": "Internal server error",
                    "error": "An unexpected error occurred. Please try again later.",
                    "request_id": request_id
                },
                headers={REQUEST_ID_HEADER: request_id}
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
