import os
import json
import logging
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("api.access")


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if os.getenv("LOGGING_ENABLED", "false").lower() != "true":
            return await call_next(request)

        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:16]
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("request_crashed", extra={"request_id": request_id, "endpoint": request.url.path})
            raise
        elapsed = round((time.perf_counter() - start) * 1000, 2)
        response.headers["X-Request-ID"] = request_id
        logger.info(json.dumps({
            "ts": time.time(),
            "request_id": request_id,
            "ip": request.client.host if request.client else None,
            "method": request.method,
            "endpoint": request.url.path,
            "status": response.status_code,
            "latency_ms": elapsed,
        }))
        return response
