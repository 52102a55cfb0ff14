from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from .config import settings
from .logging_utils import configure_logging
from .startup import WEB_SERVER_OK, run_startup_sequence

configure_logging()
logger = logging.getLogger("smokecheck.app")

# Docs and schema routes are off so that GET / is the only route served.
app = FastAPI(
    title="smokecheck",
    version="1.0.0",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)


@app.on_event("startup")
async def startup_event() -> None:
    run_startup_sequence()
    logger.info(
        "Startup checks passed",
        extra={
            "event": "startup",
            "db_backend": "sqlite" if settings.is_sqlite else settings.database_url.split(":", 1)[0],
        },
    )


@app.middleware("http")
async def request_log_middleware(request: Request, call_next):
    response = await call_next(request)
    logger.info(
        "Request handled",
        extra={
            "event": "request",
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
        },
    )
    return response


@app.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return WEB_SERVER_OK
