"""
# Route Dependencies

FastAPI dependencies shared by the routers.

## `get_services`
Returns the `ServiceContainer` the lifespan placed on `app.state.services`. Routers never import
stores or services as module globals.

## `get_current_user_id`
Guards the authoring endpoint. The session token is read from `Authorization: Bearer <token>`:

| Situation                         | Response                          |
|-----------------------------------|-----------------------------------|
| header missing / not Bearer       | 401 `No access token`             |
| bad signature, expired, bad claim | 403 `Access token is invalid`     |
| valid                             | the user's `ObjectId`             |

**Usage:**
```python
@router.post("/create-blog")
async def create_blog(author_id: ObjectId = Depends(get_current_user_id)):
    ...
```

Attributes:
    oauth2_scheme (OAuth2PasswordBearer): Bearer token extractor with `auto_error=False` so a
        missing token can be reported with this API's own message.
"""

from typing import Optional

from bson import ObjectId
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from blog_platform.database.serialization import coerce_object_id
from blog_platform.managers.credential_manager import INVALID_TOKEN_MESSAGE
from blog_platform.managers.logging_manager import get_logger
from blog_platform.services.container import ServiceContainer
from blog_platform.utils.errors import AuthError, BlogPlatformError

logger = get_logger(prefix="[Route Dependencies]")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/sign-in", auto_error=False)


def get_services(request: Request) -> ServiceContainer:
    services = getattr(request.app.state, "services", None)
    if services is None:
        logger.error("Request received before services were initialized")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Service not ready")
    return services


def to_http_exception(error: BlogPlatformError) -> HTTPException:
    """Map a domain error to the HTTP response the client sees."""
    return HTTPException(status_code=error.status_code, detail=error.message)


async def get_current_user_id(
    token: Optional[str] = Depends(oauth2_scheme),
    services: ServiceContainer = Depends(get_services),
) -> ObjectId:
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No access token")

    try:
        user_id = services.credentials.decode_session_token(token)
    except AuthError as e:
        raise to_http_exception(e)

    author_id = coerce_object_id(user_id)
    if author_id is None:
        logger.warning("Session token carried a malformed user id")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=INVALID_TOKEN_MESSAGE)
    return author_id
