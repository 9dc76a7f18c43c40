from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from intake_gateway.core.backends import get_admission_pipeline
from intake_gateway.services.admission import AdmissionPipeline

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness probe; does not touch any backend."""

    return {"status": "ok"}


@router.get("/health/ready")
async def readiness_check(
    pipeline: Annotated[AdmissionPipeline, Depends(get_admission_pipeline)],
) -> dict:
    """Readiness probe: the tenant store must answer a trivial query.

    Raises:
        BackendUnavailableError: Mapped to 503 by the global handler.
        ConfigurationAppError: Mapped to 500 when the backend is not configured.
    """

    await pipeline.tenants.ping()
    return {"status": "ok"}
