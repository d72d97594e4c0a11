"""
Shared FastAPI App Factory

Provides common app setup for production and test environments.
"""

from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from uuid_utils import uuid7

from src.platform.config.core_setting import settings
from src.platform.config.di import close_record_store, container, open_record_store
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.constant.route_constant import (
    HEALTH,
    METRICS,
    ORDER_BASE,
    PRODUCT_BASE,
    REQUEST_ID_HEADER,
    USER_ID_HEADER,
)
from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.logging.loguru_io import Logger
from src.platform.logging.loguru_io_config import request_context_var
from src.service.marketplace.driving_adapter.http_controller.order_controller import (
    router as order_router,
)
from src.service.marketplace.driving_adapter.http_controller.product_controller import (
    router as product_router,
)


Lifespan = Callable[[FastAPI], AbstractAsyncContextManager[Any]]


def build_lifespan(label: str) -> Lifespan:
    """Startup: wire DI, open the record store. Shutdown: close it, unwire."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        Logger.base.info(f'🚀 [{label}] Starting up...')
        container.wire(modules=WIRE_MODULES)
        record_store = await open_record_store()
        Logger.base.info(f'✅ [{label}] {type(record_store).__name__} ready, serving requests')

        yield

        Logger.base.info(f'🛑 [{label}] Shutting down...')
        await close_record_store()
        container.unwire()
        Logger.base.info(f'👋 [{label}] Shutdown complete')

    return lifespan


def create_app(
    *,
    lifespan: Lifespan,
    title_suffix: str = '',
    description: str = 'Marketplace - products, orders and order lifecycle',
) -> FastAPI:
    """
    Create a configured FastAPI application.

    Args:
        lifespan: Async context manager for app lifespan (startup/shutdown)
        title_suffix: Optional suffix for app title (e.g., " (Test)")
        description: App description

    Returns:
        Configured FastAPI application
    """
    title = f'{settings.PROJECT_NAME}{title_suffix}'

    app = FastAPI(
        title=title,
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    # Tag every log line of a request with its id and caller
    _register_request_context(app)

    # Register exception handlers
    register_exception_handlers(app)

    # Include routers
    app.include_router(product_router, prefix=PRODUCT_BASE, tags=['product'])
    app.include_router(order_router, prefix=ORDER_BASE, tags=['order'])

    # Register common endpoints
    _register_common_endpoints(app)

    return app


def _register_common_endpoints(app: FastAPI) -> None:
    """Register health and metrics endpoints."""

    @app.get(HEALTH)
    async def health_check() -> dict[str, str]:
        """Health check endpoint for container orchestration."""
        return {'status': 'healthy', 'service': settings.PROJECT_NAME}

    @app.get(METRICS)
    async def get_metrics() -> PlainTextResponse:
        """Prometheus metrics endpoint."""
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


def _register_request_context(app: FastAPI) -> None:
    @app.middleware('http')
    async def request_context(request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid7())
        caller = request.headers.get(USER_ID_HEADER) or 'anonymous'
        token = request_context_var.set(f'{request_id} {caller}')
        try:
            response = await call_next(request)
        finally:
            request_context_var.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
