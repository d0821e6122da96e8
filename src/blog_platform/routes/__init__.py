"""
# Routes Package

FastAPI routers for the Blog Platform. `main.py` includes them in this order:

- **`auth_router`**: `/sign-up`, `/sign-in`, `/google-auth`
- **`blog_router`**: authoring, feeds, search and `/get-blog`
- **`users_router`**: `/search-users`, `/get-profile`
- **`uploads_router`**: `/get-upload-url`
"""

from blog_platform.routes.auth import router as auth_router
from blog_platform.routes.blog import router as blog_router
from blog_platform.routes.uploads import router as uploads_router
from blog_platform.routes.users import router as users_router

__all__ = ["auth_router", "blog_router", "uploads_router", "users_router"]
