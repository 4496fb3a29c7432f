"""
Application factory for the Valuation Lab HTTP API.

    uvicorn valuelab_service.app:app
"""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from valuelab_service import config
from valuelab_service.api.router import router as api_router

API_VERSION = "0.1.0"

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger("valuelab_service")


async def log_requests(request: Request, call_next):
    """Log each request with its status and latency; turn escaped exceptions into a 500."""
    method, path = request.method, request.url.path
    logger.info("Incoming request: %s %s", method, path)
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error("Request failed: %s %s Error: %s", method, path, e)
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

    logger.info(
        "Request completed: %s %s Status: %d Time: %.4fs",
        method,
        path,
        response.status_code,
        time.perf_counter() - started,
    )
    return response


def create_app() -> FastAPI:
    """Build the API: engine, market and scenario routes behind the request logger."""
    application = FastAPI(
        title="Valuation Lab API",
        version=API_VERSION,
        description="DCF, LBO and portfolio risk engines, market quotes and a scenario library",
    )
    application.include_router(api_router)
    application.middleware("http")(log_requests)

    @application.get("/", summary="Liveness")
    def read_root():
        return {"message": "Valuation Lab API is running"}

    return application


app = create_app()
