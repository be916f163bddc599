"""Health, readiness, and version endpoints."""

from fastapi import APIRouter, Depends

from studyhub.dependencies import get_services
from studyhub.redis_client import get_redis
from studyhub.services import Services

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe. Returns 200 if the process is alive."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness(services: Services = Depends(get_services)) -> dict[str, object]:
    """Readiness probe. The store must answer; Redis is optional."""
    checks: dict[str, object] = {}

    checks["store"] = "ok" if await services.store.ping() else "error"

    try:
        redis = get_redis()
        await redis.ping()
        checks["redis"] = "ok"
    except RuntimeError:
        checks["redis"] = "disabled"
    except Exception as exc:
        checks["redis"] = f"error: {exc}"

    ready = checks["store"] == "ok"
    return {"status": "ready" if ready else "degraded", "checks": checks}


@router.get("/version")
async def version(services: Services = Depends(get_services)) -> dict[str, str]:
    """Return API version and environment."""
    settings = services.settings
    return {
        "version": settings.app_version,
        "environment": settings.environment,
    }
