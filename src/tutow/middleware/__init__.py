"""Middleware registration."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tutow.config import Settings
from tutow.middleware.error_handler import setup_error_handlers
from tutow.middleware.logging import setup_logging
from tutow.middleware.rate_limit import RateLimitMiddleware
from tutow.middleware.request_id import REQUEST_ID_HEADER, RequestIdMiddleware

_RATE_LIMIT_HEADERS = ["X-RateLimit-Remaining", "X-RateLimit-Limit", "Retry-After"]


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register logging, error handlers and the middleware stack.

    Starlette runs middleware in reverse-add order. CORS is added last so
    429 responses from the rate limiter still carry CORS headers and the
    web client can read them.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_window=settings.rate_limit_requests,
        auth_requests_per_window=settings.rate_limit_auth,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER, *_RATE_LIMIT_HEADERS],
    )
