from __future__ import annotations

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from carservice.db import dispose_engine, initialize_db
from carservice.errors import CarServiceError
from carservice.logging import configure_logging, reconfigure
from web.deps import AuthMiddleware, DBConnectionMiddleware
from web.routes.bill import router as bill_router

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    initialize_db()
    # Re-apply logging config, Alembic's fileConfig may have overridden it
    reconfigure()
    logger.info("Application started")
    yield
    dispose_engine()
    logger.info("Application stopped")


app = FastAPI(docs_url=None, redoc_url=None, lifespan=lifespan)

app.add_middleware(DBConnectionMiddleware)
app.add_middleware(AuthMiddleware)

app.include_router(bill_router)


@app.exception_handler(CarServiceError)
async def carservice_error_handler(request: Request, exc: CarServiceError):
    log = logger.error if exc.status_code >= 500 else logger.warning
    log("%s on %s %s: %s", exc.kind, request.method, request.url.path, exc.message)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning("Invalid request data on %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        {
            "status": "error",
            "message": "Invalid request data",
            "error": "validation_error",
            "details": str(exc.errors()),
        },
        status_code=400,
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s:\n%s",
        request.method,
        request.url.path,
        traceback.format_exc(),
    )
    return JSONResponse(
        {"status": "error", "message": "Internal Server Error", "error": "internal_error"},
        status_code=500,
    )


@app.get("/health")
async def health():
    return {"status": "success"}
