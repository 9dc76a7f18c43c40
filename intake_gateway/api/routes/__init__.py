from __future__ import annotations

from intake_gateway.api.routes.contact import router as contact_router
from intake_gateway.api.routes.health import router as health_router

__all__ = ["contact_router", "health_router"]
