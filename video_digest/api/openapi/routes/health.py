"""Health check endpoints."""

from enum import Enum

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from video_digest.api.dependencies import DispatcherDep, FactoryDep, SettingsDep

router = APIRouter()


class HealthStatus(str, Enum):
    """Health check status."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    """Health status of a single component."""

    name: str = Field(description="Component name")
    status: HealthStatus = Field(description="Component health status")
    message: str | None = Field(default=None, description="Additional details")


class HealthResponse(BaseModel):
    """Health check response."""

    status: HealthStatus = Field(description="Overall health status")
    version: str = Field(description="Application version")
    environment: str = Field(description="Deployment environment")
    components: list[ComponentHealth] = Field(
        default_factory=list,
        description="Individual component health",
    )
    jobs: dict[str, int] = Field(
        default_factory=dict,
        description="Tracked jobs per status",
    )


class LivenessResponse(BaseModel):
    """Simple liveness response."""

    status: str = Field(default="ok")


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool = Field(description="Whether the service is ready to accept requests")
    checks: dict[str, bool] = Field(
        default_factory=dict,
        description="Individual readiness checks",
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Get overall health status of the service and its components.",
)
async def health_check(
    settings: SettingsDep,
    factory: FactoryDep,
    dispatcher: DispatcherDep,
) -> HealthResponse:
    """Check object storage and report job registry occupancy."""
    components: list[ComponentHealth] = []
    overall_status = HealthStatus.HEALTHY

    blob_health = await factory.get_blob_storage().health_check()
    if blob_health.healthy:
        components.append(
            ComponentHealth(
                name="blob_storage",
                status=HealthStatus.HEALTHY,
                message=f"Provider: {settings.blob_storage.provider}",
            )
        )
    else:
        components.append(
            ComponentHealth(
                name="blob_storage",
                status=HealthStatus.UNHEALTHY,
                message=blob_health.message,
            )
        )
        # Only the audio pipeline needs storage
        overall_status = HealthStatus.DEGRADED

    components.append(
        ComponentHealth(
            name="job_dispatcher",
            status=HealthStatus.HEALTHY,
            message=f"{dispatcher.running_jobs} running",
        )
    )

    return HealthResponse(
        status=overall_status,
        version=settings.app.version,
        environment=settings.app.environment,
        components=components,
        jobs=dispatcher.registry.status_counts(),
    )


@router.get(
    "/health/live",
    response_model=LivenessResponse,
    summary="Liveness check",
    description="Reports that the process is up, for Kubernetes.",
)
async def liveness() -> LivenessResponse:
    """Simple liveness check - just verifies the app is running."""
    return LivenessResponse(status="ok")


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Reports whether dependencies are reachable, for Kubernetes.",
)
async def readiness(
    request: Request,
    factory: FactoryDep,
) -> ReadinessResponse:
    """Check if service is ready to accept requests.

    Verifies the dispatcher was started and object storage answers.
    """
    checks: dict[str, bool] = {}

    checks["job_dispatcher"] = hasattr(request.app.state, "job_dispatcher")
    checks["blob_storage"] = (await factory.get_blob_storage().health_check()).healthy

    return ReadinessResponse(ready=all(checks.values()), checks=checks)
