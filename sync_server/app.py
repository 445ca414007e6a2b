"""
FastAPI application initialization and configuration.
"""
import logging
from fastapi import FastAPI

from headers import CLIENT_VERSION
from .middleware import log_requests_middleware
from .endpoints import health_router, sync_router

logger = logging.getLogger(__name__)

app = FastAPI(title="SSE Sync Server", version=CLIENT_VERSION)

app.middleware("http")(log_requests_middleware)

app.include_router(health_router)
app.include_router(sync_router)

logger.debug("FastAPI application initialized with all routers and middleware")
