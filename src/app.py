"""Pizza delivery FastAPI application.

Usage:
    uvicorn app:app --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bootstrap import Services, build_services
from shared.config import Settings, get_settings
from shared.logging import configure_logging
from shared.web import register_error_handlers

logger = structlog.get_logger(__name__)


def create_app(settings: Settings | None = None, services: Services | None = None) -> FastAPI:
    """Build the app. Services are wired from ``settings`` at startup unless given."""
    if settings is None:
        settings = services.settings if services is not None else get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings)
        if app.state.services is None:
            app.state.services = build_services(settings)
        workers = app.state.services.workers
        if settings.workers_enabled:
            workers.start()
        logger.info("Service started", env=settings.env, workers=settings.workers_enabled)
        try:
            yield
        finally:
            await workers.stop()
            logger.info("Service stopped")

    app = FastAPI(
        title="Pizza Delivery API",
        description="Users, sessions, carts and checkout for a pizza delivery service",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    from catalogue.api import product_router
    from identity.api import token_router, user_router
    from ordering.api import cart_router, checkout_router, order_router

    app.include_router(user_router)
    app.include_router(token_router)
    app.include_router(product_router)
    app.include_router(cart_router)
    app.include_router(checkout_router)
    app.include_router(order_router)

    # -----------------------------------------------------------------------
    # Health / ping
    # -----------------------------------------------------------------------
    @app.get("/ping")
    async def ping():
        return JSONResponse(content={})

    @app.get("/health")
    async def health():
        current = app.state.services
        return JSONResponse(
            content={
                "status": "ok",
                "env": settings.env,
                "workers": {
                    worker.name: worker.running for worker in (current.workers.workers if current else [])
                },
            }
        )

    return app


app = create_app()
