"""
FastAPI middleware for request logging and timing.
"""
import time
import logging
from fastapi import Request

logger = logging.getLogger(__name__)


async def log_requests_middleware(request: Request, call_next):
    """Middleware for request logging and timing"""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time

    # For streaming endpoints this is the time until the response started
    if request.url.path.startswith("/v1/"):
        client_host = request.client.host if request.client else "-"
        logger.info(f"{request.method} {request.url.path} from {client_host} - {response.status_code} - {process_time:.3f}s")

    return response
