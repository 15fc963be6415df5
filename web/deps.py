from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from carservice.db import get_engine
from carservice.repositories.sqlalchemy import SQLAlchemyBillRepository
from carservice.security import identity_from_header
from carservice.services.bill_service import BillService

logger = logging.getLogger(__name__)

PUBLIC_EXACT_PATHS = {"/health"}


class AuthMiddleware:
    """Pure ASGI middleware, resolves the bearer token into ``request.state.user_id``."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        path = request.url.path
        if path in PUBLIC_EXACT_PATHS:
            await self.app(scope, receive, send)
            return

        user_id = identity_from_header(request.headers.get("authorization"))
        if user_id is None:
            logger.info("Auth rejected: %s %s, missing or invalid bearer token", request.method, path)
            response = JSONResponse({"status": "error", "message": "Unauthorized"}, status_code=401)
            await response(scope, receive, send)
            return
        request.state.user_id = user_id
        await self.app(scope, receive, send)


class DBConnectionMiddleware:
    """Pure ASGI middleware, creates a single DB connection per request."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        request.state.db_conn = None
        try:
            await self.app(scope, receive, send)
        finally:
            conn = getattr(request.state, "db_conn", None)
            if conn is not None:
                conn.close()
                logger.debug("DB connection closed for %s %s", request.method, request.url.path)


def _get_conn(request: Request):
    """Lazy per-request connection, created on first use and closed by middleware."""
    if request.state.db_conn is None:
        logger.debug("Creating DB connection for %s %s", request.method, request.url.path)
        request.state.db_conn = get_engine().connect()
    return request.state.db_conn


def get_bill_service(request: Request) -> BillService:
    return BillService(SQLAlchemyBillRepository(_get_conn(request)))


def get_current_user_id(request: Request) -> str | None:
    return getattr(request.state, "user_id", None)
