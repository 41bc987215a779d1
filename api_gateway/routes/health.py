"""
Health check endpoint.

Reports media tool availability and which API keys are configured.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api_gateway.dependencies import get_clients, get_compositor
from modules.compositor.engine import CompositingEngine
from shared.clients import ServiceClients
from shared.logging import get_logger

logger = get_logger("api_gateway.routes.health")

router = APIRouter()


@router.get("/health")
async def health_check(
    clients: ServiceClients = Depends(get_clients),
    compositor: CompositingEngine = Depends(get_compositor)
):
    """
    Health check endpoint.

    Returns:
        Health status; 503 when ffmpeg or ffprobe cannot be executed
    """
    issues = []

    media_tools = await compositor.check_available()
    for name, available in media_tools.items():
        if not available:
            issues.append(f"{name} not available")

    api_keys = clients.configured_keys()
    missing_keys = [name for name, configured in api_keys.items() if not configured]

    status_code = 503 if issues else 200
    response = {
        "status": "healthy" if status_code == 200 else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": clients.settings.environment,
        "media_tools": media_tools,
        "api_keys": api_keys,
    }
    if issues:
        response["issues"] = issues
        logger.warning("Health check failed", extra={"issues": issues})
    if missing_keys:
        response["missing_keys"] = missing_keys

    return JSONResponse(content=response, status_code=status_code)
