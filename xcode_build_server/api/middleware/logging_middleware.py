from typing import Callable
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from xcode_build_server.common.config.logging_config import get_logger


logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Tags each request with a short id and logs its outcome."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        started = time.perf_counter()
        target = f"{request.method} {request.url.path}"

        logger.debug(f"[{request_id}] {target}", extra={"request_id": request_id})

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed = time.perf_counter() - started
            logger.error(
                f"[{request_id}] {target} raised {type(e).__name__} after {elapsed:.2f}s",
                extra={"request_id": request_id},
            )
            raise

        elapsed = time.perf_counter() - started
        log = logger.warning if response.status_code >= 400 else logger.info
        log(
            f"[{request_id}] {target} -> {response.status_code} in {elapsed:.2f}s",
            extra={"request_id": request_id},
        )

        response.headers["X-Request-ID"] = request_id
        return response
