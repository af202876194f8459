# warehouse/middleware/request_logging.py

import time
import logging
from fastapi import Request

access_logger = logging.getLogger("access")

# health probes are polled; keep them out of the access log
QUIET_PATHS = {"/"}


async def request_logging_middleware(request: Request, call_next):
    started = time.perf_counter()

    response = await call_next(request)

    if request.url.path in QUIET_PATHS:
        return response

    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

    access_logger.info(
        "request",
        extra={
            "client_addr": request.client.host if request.client else "-",
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "process_time_ms": elapsed_ms,
        },
    )

    if response.status_code >= 500:
        logging.getLogger(__name__).warning(
            "Server error response",
            extra={"path": request.url.path, "status_code": response.status_code},
        )

    return response
