"""
# Blog Platform

A **FastAPI + MongoDB backend** for a multi-author blogging site: account sign-up and sign-in
(local password or Google), blog authoring, and discovery feeds with engagement counters.

## Package Structure

- **`main`**: Application entry point, lifespan management, and route aggregation
- **`config`**: Pydantic-based configuration management with environment variable support
- **`database`**: MongoDB connection management, indexes, and the two document stores
  (`IdentityStore` for users, `ContentStore` for blogs)
- **`managers`**: Wrappers around external collaborators (password hashing, session tokens,
  Google identity verification, S3 upload signing) and logging
- **`services`**: Business logic (identity reconciliation, publishing, engagement counters,
  discovery queries, counter reconciliation)
- **`routes`**: FastAPI routers exposing the HTTP surface

## Consistency Model

Users carry denormalized counters (`account_info.total_posts`, `account_info.total_reads`)
and a forward index of their blogs. These are updated as a **second, best-effort step** after
the authoritative blog write. They may drift; `cli.reconcile_cli` recomputes them from the
`blogs` collection.

Attributes:
    __version__ (str): Package version following semantic versioning.
    settings (Settings): Re-exported global configuration singleton from `config.py`.
"""

__version__ = "1.0.0"

# Re-export commonly used objects for convenience
from blog_platform.config import settings

__description__ = "A FastAPI backend for blog publishing and discovery"
