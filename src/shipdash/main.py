"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import form, health, shipments
from .config import settings
from .services.dashboard import ShipmentDashboard, build_dashboard


def create_app(dashboard: ShipmentDashboard | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        active = dashboard or build_dashboard()
        app.state.dashboard = active
        if not active.start():
            logging.error("Dashboard unavailable; shipment endpoints will answer 503")
        yield
        active.stop()

    app = FastAPI(title=settings.app_name, root_path="", lifespan=lifespan)
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Root endpoint for diagnostics
    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(shipments.router, prefix=settings.api_prefix)
    app.include_router(form.router, prefix=settings.api_prefix)
    return app


app = create_app()
