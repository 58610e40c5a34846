"""Logging middleware for request/response tracking."""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ...utils.logger import get_logger


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all requests and responses."""

    def __init__(self, app):
        super().__init__(app)
        self.logger = get_logger()

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process and log each request/response."""
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        self.logger.log_request(
            request_id=request_id,
            method=request.method,
            endpoint=request.url.path,
            query_params=dict(request.query_params)
        )

        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self.logger.log_error(
                f"Request failed: {str(e)}",
                error=e,
                request_id=request_id,
                duration_ms=duration_ms
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        self.logger.log_response(
            request_id=request_id,
            status_code=response.status_code,
            duration_ms=duration_ms
        )
        response.headers["X-Request-ID"] = request_id
        return response
