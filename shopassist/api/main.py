"""FastAPI application main module.

This module defines the proxy application: it wires the relay router, the
request logging middleware and the handler that collapses remote failures into
the generic ``{"error": ...}`` payload. It is the entry point for the API
server.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shopassist import __version__
from shopassist.api.exceptions import ShopAssistException
from shopassist.api.logging_config import RequestLoggingMiddleware, setup_logging
from shopassist.api.metrics import relay_metrics
from shopassist.api.routes import shop
from shopassist.api.upstream import RemoteAssistantAPI
from shopassist.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, json_format=settings.LOG_JSON)
    app.state.remote_api = RemoteAssistantAPI(
        settings.REMOTE_API_BASE,
        timeout=settings.REMOTE_TIMEOUT_S,
    )
    logger.info("Proxy started", extra={"remote_api_base": settings.REMOTE_API_BASE})
    yield
    await app.state.remote_api.close()


# Create FastAPI application instance
app = FastAPI(
    title="ShopAssist Proxy",
    description="Stateless relay between the shopping assistant client and the remote assistant API",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)

# Include routers
app.include_router(shop.router)


@app.exception_handler(ShopAssistException)
async def shopassist_exception_handler(
    request: Request, exc: ShopAssistException
) -> JSONResponse:
    """Log the failure with its details and return only the public message."""
    logger.error(
        f"Error in {request.url.path}: {exc.message}",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "error_type": type(exc).__name__,
            "details": exc.details,
        },
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.get("/ping")
def ping() -> Dict[str, str]:
    """Health check endpoint.

    Returns:
        Dictionary with status key set to "ok".

    Example:
        >>> response = client.get("/ping")
        >>> assert response.json() == {"status": "ok"}
    """
    return {"status": "ok"}


@app.get("/status")
def status() -> Dict[str, Any]:
    """Report relay counters and latency per route."""
    return {"status": "ok", "version": __version__, **relay_metrics.get_metrics()}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "shopassist.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
