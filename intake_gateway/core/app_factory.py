"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers) so
tests can build isolated instances.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from intake_gateway.api.routes import contact_router, health_router
from intake_gateway.core.backends import shutdown_backends
from intake_gateway.core.config import settings
from intake_gateway.core.exception_handlers import setup_exception_handlers
from intake_gateway.core.logging import configure_logging
from intake_gateway.core.middleware import request_id_middleware


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    await shutdown_backends()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Contact Intake Gateway",
        description=(
            "Multi-tenant intake endpoint for website contact forms. Validates "
            "tenant, origin, honeypot and hourly quota, stores an audit record "
            "and notifies the tenant's webhook."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(contact_router, prefix="/v1")
    app.include_router(health_router)

    return app
