# launchpad/main.py
from __future__ import annotations

import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from launchpad.api.admin import router as admin_router
from launchpad.api.health import router as health_router
from launchpad.api.payments import router as payments_router
from launchpad.api.responses import ApiError, error_response
from launchpad.api.tokens import router as tokens_router
from launchpad.config.settings import Settings, get_settings
from launchpad.services.discovery import TokenAggregator
from launchpad.services.minting import MintService
from launchpad.services.payments import PaymentService
from launchpad.utils.log import configure_logging

logger = logging.getLogger("launchpad.http")


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "invalid request"
    first = errors[0]
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    return f"{field}: {first.get('msg')}" if field else str(first.get("msg"))


def create_app(
    settings: Optional[Settings] = None,
    *,
    aggregator: Optional[TokenAggregator] = None,
    payments: Optional[PaymentService] = None,
    minting: Optional[MintService] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)

    app = FastAPI(title="Mint Launcher API")

    app.state.settings = settings
    app.state.aggregator = aggregator or TokenAggregator.from_settings(settings)
    app.state.payments = payments or PaymentService(settings)
    app.state.minting = minting or MintService(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.FRONTEND_URLS),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Routers
    app.include_router(health_router)
    app.include_router(tokens_router)
    app.include_router(payments_router)
    app.include_router(admin_router)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        t0 = time.perf_counter()
        response = await call_next(request)
        dt_ms = int((time.perf_counter() - t0) * 1000)
        logger.info("%s %s | %s | %dms", request.method, request.url.path, response.status_code, dt_ms)
        return response

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return error_response(
            status_code=exc.status_code,
            message=exc.message,
            error=exc.error,
            debug=settings.debug_errors,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        logger.warning("validation error | %s %s | %s", request.method, request.url.path, message)
        # validation messages describe the caller's input, so they are always returned
        return error_response(status_code=400, message="Validation error", error=message, debug=True)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return error_response(status_code=404, message="API endpoint not found")
        return error_response(status_code=exc.status_code, message=str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled error | %s %s", request.method, request.url.path)
        return error_response(
            status_code=500,
            message="Internal server error",
            error=repr(exc),
            debug=settings.debug_errors,
        )

    logger.info("mint launcher ready | network=%s | rpc=%s", settings.SOLANA_NETWORK, settings.SOLANA_RPC_URL)
    return app


app = create_app()
