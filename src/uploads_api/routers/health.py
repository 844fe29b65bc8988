import logging

from fastapi import APIRouter, Depends

from uploads_api.config.settings import Settings
from uploads_api.dependencies import get_app_settings, get_file_service
from uploads_api.services.files import FileService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(
    settings: Settings = Depends(get_app_settings),
    service: FileService = Depends(get_file_service),
):
    """
    Health check endpoint for monitoring API status and component readiness.

    Returns status of the API, the S3 bucket and the record store along with deployment mode.
    """
    health_status = {
        "status": "ok",
        "deployment_mode": settings.deployment_mode,
        "record_store_backend": settings.record_store_backend,
        "components": {
            "api": "ready",
            "storage": "ready",
            "record_store": "ready"
        },
        "ready": False
    }

    try:
        service.s3_client.head_bucket(Bucket=service.bucket_name)
    except Exception as e:
        logger.warning(f"Bucket {service.bucket_name} unreachable: {e}")
        health_status["components"]["storage"] = "unreachable"
        health_status["status"] = "degraded"

    try:
        service.record_store.ping()
    except Exception as e:
        logger.warning(f"Record store unreachable: {e}")
        health_status["components"]["record_store"] = "unreachable"
        health_status["status"] = "degraded"

    health_status["ready"] = all(
        state == "ready" for state in health_status["components"].values()
    )

    return health_status
