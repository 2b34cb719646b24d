"""
Health check routes - public, no authentication required.
"""
from fastapi import APIRouter

router = APIRouter()


@router.get(
    "",
    summary="System health check",
)
async def health_check():
    """
    Check system health status.

    Reports which outbound integrations are configured (Zoho Books,
    extraction backend, screenshot OCR). No calls are made to them.
    No authentication required.
    """
    import config

    health = {
        "status": "healthy",
        "service": config.SERVICE_NAME,
        "version": config.SERVICE_VERSION,
        "components": {"config": "ok"},
    }

    zoho_ready = all([config.ZOHO_CLIENT_ID, config.ZOHO_CLIENT_SECRET, config.ZOHO_REFRESH_TOKEN])
    health["components"]["zoho"] = "configured" if zoho_ready else "unconfigured"
    health["components"]["backend"] = "configured" if config.API_BASE_URL else "unconfigured"
    health["components"]["ocr"] = "configured" if config.GOOGLE_API_KEY else "unconfigured"
    health["components"]["auth"] = "configured" if config.API_JWT_SECRET else "unconfigured"

    if health["components"]["auth"] != "configured":
        health["status"] = "degraded"

    return health
