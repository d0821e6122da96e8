"""
# Authentication Routes

Sign-up and sign-in endpoints. Each returns the same session profile:

```json
{"access_token": "<jwt>", "profile_img": "...", "username": "ada", "fullname": "Ada Lovelace"}
```

- `POST /sign-up`: create a local account (email + password).
- `POST /sign-in`: sign in to a local account.
- `POST /google-auth`: sign in or create an account with a Google (Firebase) ID token.

An email belongs to one sign-in method; using the other one answers 409.
"""

from fastapi import APIRouter, Depends, HTTPException

from blog_platform.managers.logging_manager import get_logger
from blog_platform.models.user_models import GoogleAuthRequest, SessionProfile, SignInRequest, SignUpRequest
from blog_platform.routes.dependencies import get_services, to_http_exception
from blog_platform.services.container import ServiceContainer
from blog_platform.utils.errors import BlogPlatformError

logger = get_logger(prefix="[Auth Routes]")

router = APIRouter(tags=["auth"])


@router.post("/sign-up", response_model=SessionProfile)
async def sign_up(request: SignUpRequest, services: ServiceContainer = Depends(get_services)):
    try:
        return await services.identity.sign_up(request.fullname, request.email, request.password)
    except BlogPlatformError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to sign up: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to sign up")


@router.post("/sign-in", response_model=SessionProfile)
async def sign_in(request: SignInRequest, services: ServiceContainer = Depends(get_services)):
    try:
        return await services.identity.sign_in(request.email, request.password)
    except BlogPlatformError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to sign in: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to sign in")


@router.post("/google-auth", response_model=SessionProfile)
async def google_auth(request: GoogleAuthRequest, services: ServiceContainer = Depends(get_services)):
    """The request field is named `access_token` but carries a Firebase ID token."""
    try:
        return await services.identity.federated_sign_in(request.access_token)
    except BlogPlatformError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed Google sign-in: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to authenticate with Google")
