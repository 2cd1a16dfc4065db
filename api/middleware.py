import time

import structlog
from fastapi import Request

from core.logging import BusinessEvents


async def log_api_entry(request: Request, call_next):
    """Log each request with its outcome. Bodies are never logged since they carry secrets."""
    # Fresh logger per request so test configurations are respected
    log = structlog.get_logger(__name__)

    started = time.perf_counter()
    response = await call_next(request)
    log.info(
        BusinessEvents.API_ENTRY,
        method=request.method,
        path=request.url.path,
        client_host=request.client.host if request.client else None,
        query_params=dict(request.query_params),
        status=response.status_code,
        duration_ms=round((time.perf_counter() - started) * 1000, 1),
    )
    return response
