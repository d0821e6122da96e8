"""
# Blog Platform - Main Application Module

Entry point and lifecycle orchestrator for the Blog Platform FastAPI application.

## Lifespan

**Startup:**
1. **Database**: connect to MongoDB (with retries) and create/verify indexes. The unique indexes on
   `personal_info.email`, `personal_info.username` and `blog_id` must exist before traffic is
   accepted; failure here aborts startup.
2. **Services**: build the stores and services once and put them on `app.state.services`.

**Shutdown:**
1. **Pending reads**: wait briefly for in-flight author read-count updates.
2. **Database**: close the MongoDB client.

## Endpoints

- Routers from `blog_platform.routes` (auth, blogs, users, uploads).
- `GET /health`: 200 when MongoDB answers a ping, 503 otherwise.
- `GET /metrics`: Prometheus scrape endpoint (`prometheus-fastapi-instrumentator` plus the
  counters in `services.metrics`).

## Usage Example

```bash
uvicorn blog_platform.main:app --reload --host 0.0.0.0 --port 3000
```

Attributes:
    logger (Logger): Main application logger.
    app (FastAPI): The ASGI application.
"""

from contextlib import asynccontextmanager
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
import uvicorn

from blog_platform import __version__
from blog_platform.config import settings
from blog_platform.database import ContentStore, DatabaseManager, IdentityStore
from blog_platform.managers.logging_manager import get_logger
from blog_platform.routes import auth_router, blog_router, uploads_router, users_router
from blog_platform.services.container import build_services

logger = get_logger(prefix="[Main]")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Connect the database, wire the services, and tear both down on shutdown.

    Raises:
        Exception: Any database connection or unique-index failure propagates and stops startup.
    """
    startup_start_time = time.time()
    logger.info(
        f"Starting Blog Platform API v{__version__} "
        f"({'production' if settings.is_production else 'development'})"
    )

    database = DatabaseManager()
    await database.connect()
    await database.create_indexes()

    identity_store = IdentityStore(database.get_collection(settings.USERS_COLLECTION))
    content_store = ContentStore(database.get_collection(settings.BLOGS_COLLECTION), identity_store)
    _app.state.services = build_services(identity_store, content_store, database=database)

    logger.info(f"Application ready in {time.time() - startup_start_time:.3f}s")

    yield

    shutdown_start_time = time.time()
    services = _app.state.services
    try:
        await services.engagement.drain()
    except Exception as e:
        logger.error(f"Error while draining pending read updates: {e}")

    try:
        await database.disconnect()
    except Exception as e:
        logger.error(f"Error during database disconnection: {e}")

    logger.info(f"FastAPI application shutdown completed in {time.time() - shutdown_start_time:.3f}s")


app = FastAPI(
    title="Blog Platform API",
    description="Accounts, blog publishing and discovery feeds for a multi-author blogging site.",
    version=__version__,
    lifespan=lifespan,
)

logger.info(f"Configuring CORS with origins: {settings.cors_origins_list}")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials="*" not in settings.cors_origins_list,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,
)

routers_config = [
    ("auth", auth_router, "Sign-up and sign-in endpoints"),
    ("blogs", blog_router, "Authoring, feeds, search and blog pages"),
    ("users", users_router, "User search and public profiles"),
    ("uploads", uploads_router, "Pre-signed image upload URLs"),
]

for router_name, router, description in routers_config:
    app.include_router(router)
    logger.info(f"Successfully included {router_name} router: {description}")


@app.get("/health", include_in_schema=False)
async def health(request: Request):
    services = getattr(request.app.state, "services", None)
    database = services.database if services else None
    healthy = database is not None and await database.health_check()
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={"status": "ok" if healthy else "unavailable", "database": healthy},
    )


logger.info("Setting up Prometheus metrics instrumentation...")
try:
    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_respect_env_var=False,
        should_instrument_requests_inprogress=True,
    )
    instrumentator.instrument(app).expose(app, include_in_schema=False, endpoint="/metrics")
    logger.info("Prometheus metrics instrumentation configured successfully")
except Exception as e:
    logger.error(f"Failed to configure Prometheus metrics: {e}")


def run():
    uvicorn.run("blog_platform.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG, log_level="info")


if __name__ == "__main__":
    run()
