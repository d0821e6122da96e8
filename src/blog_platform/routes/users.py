"""
# User Routes

Public user lookups.

- `POST /search-users` `{query}` -> `{users}`: up to 50 users whose username contains `query`
  (case-insensitive), with `fullname`, `username` and `profile_img` only.
- `POST /get-profile` `{username}` -> the profile document without password, auth method,
  `updatedAt` or blog list; 404 if there is no such user.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from blog_platform.managers.logging_manager import get_logger
from blog_platform.models.user_models import GetProfileRequest, SearchUsersRequest, UserSearchResponse
from blog_platform.routes.dependencies import get_services, to_http_exception
from blog_platform.services.container import ServiceContainer
from blog_platform.utils.errors import BlogPlatformError

logger = get_logger(prefix="[User Routes]")

router = APIRouter(tags=["users"])


@router.post("/search-users", response_model=UserSearchResponse)
async def search_users(request: SearchUsersRequest, services: ServiceContainer = Depends(get_services)):
    try:
        return UserSearchResponse(users=await services.discovery.search_users(request.query))
    except BlogPlatformError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to search users: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to search users")


@router.post("/get-profile")
async def get_profile(
    request: GetProfileRequest, services: ServiceContainer = Depends(get_services)
) -> Dict[str, Any]:
    try:
        return await services.discovery.get_profile(request.username)
    except BlogPlatformError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to get profile: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get profile")
