"""Pre-signed upload URLs for banner and inline images."""

from fastapi import APIRouter, Depends, HTTPException

from blog_platform.managers.logging_manager import get_logger
from blog_platform.models.blog_models import UploadUrlResponse
from blog_platform.routes.dependencies import get_services, to_http_exception
from blog_platform.services.container import ServiceContainer
from blog_platform.utils.errors import BlogPlatformError

logger = get_logger(prefix="[Upload Routes]")

router = APIRouter(tags=["uploads"])


@router.get("/get-upload-url", response_model=UploadUrlResponse)
async def get_upload_url(services: ServiceContainer = Depends(get_services)):
    """The client `PUT`s a JPEG to the returned URL before it expires."""
    try:
        return UploadUrlResponse(uploadURL=services.storage.generate_upload_url())
    except BlogPlatformError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to generate upload URL: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to generate upload URL")
