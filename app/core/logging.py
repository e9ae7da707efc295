"""Logging setup and request logging middleware."""

from __future__ import annotations

import json
import logging
import time
from typing import Awaitable
from typing import Callable
import uuid

from fastapi import Request
from fastapi import Response

from app.core.errors import InternalServerError
from app.core.responses import json_response

logger = logging.getLogger("app.requests")

REQUEST_ID_HEADER = "X-Request-ID"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


async def request_context_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Tag each request with an id and log its start and finish."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    request.state.request_id = request_id
    started = time.perf_counter()
    logger.info(
        json.dumps(
            {
                "event": "request.started",
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
            }
        )
    )
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        response = json_response(InternalServerError().to_envelope())
    response.headers[REQUEST_ID_HEADER] = request_id
    identity = getattr(request.state, "identity", None)
    logger.info(
        json.dumps(
            {
                "event": "request.finished",
                "request_id": request_id,
                "subject": identity.subject if identity is not None else None,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            }
        )
    )
    return response
