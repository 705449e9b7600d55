"""FastAPI application."""

from contextlib import asynccontextmanager

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rally.config import Settings
from rally.domain.service import drain_notifications
from rally.interface.api.errors import register_error_handlers
from rally.interface.api.routes import (
    activities,
    auth,
    friends,
    health,
    invitations,
    notifications,
    places,
    profiles,
)
from rally.util.di.container import create_container, setup_di
from rally.util.observability import instrument_fastapi, instrument_httpx


@asynccontextmanager
async def lifespan(app_instance: FastAPI):
    yield
    # Let in-flight notification deliveries land before the pools close
    await drain_notifications()
    await app_instance.state.dishka_container.close()


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container to serve requests from; tests pass one built
            from mock providers. Defaults to the production container.
    """
    settings = Settings()

    # Instrument httpx for outbound geocoding and storage requests
    instrument_httpx()

    app_instance = FastAPI(
        title="Rally API",
        description="Backend API for Rally - organize sports activities with friends",
        version="0.1.0",
        lifespan=lifespan,
    )

    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=[
            settings.api.frontend_url,
            "http://localhost:3000",  # Local development
            "http://localhost:5173",  # Vite default
        ],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Origin",
            "User-Agent",
            "Cache-Control",
            "X-Requested-With",
        ],
        expose_headers=["Content-Length", "Content-Type"],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    setup_di(app_instance, container or create_container())
    register_error_handlers(app_instance)

    app_instance.include_router(health.router)
    app_instance.include_router(auth.router)
    app_instance.include_router(profiles.router)
    app_instance.include_router(friends.router)
    app_instance.include_router(activities.router)
    app_instance.include_router(invitations.router)
    app_instance.include_router(notifications.router)
    app_instance.include_router(places.router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
# In production: start_app.py handles this
app = create_app()
