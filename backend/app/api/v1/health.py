"""
Health Check Endpoints
"""
from fastapi import APIRouter, Depends
from datetime import datetime

from app.api.schemas import HealthCheckResponse
from app.config import settings
from app.core.registry import PoolRegistry, get_registry

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(registry: PoolRegistry = Depends(get_registry)):
    """
    Health check endpoint

    Returns the current health status of the API.
    """
    return HealthCheckResponse(
        status="healthy",
        version=settings.API_VERSION,
        pools=len(registry.all()),
        timestamp=datetime.utcnow()
    )
