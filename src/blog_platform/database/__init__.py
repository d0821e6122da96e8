"""
# Database Package

Persistence layer for the Blog Platform, built on **Motor** (async MongoDB driver).

## Components

- **`manager`**: `DatabaseManager`, which owns the client, connection lifecycle and indexes.
- **`identity_store`**: `IdentityStore`, the only code that reads or writes the `users` collection.
- **`content_store`**: `ContentStore`, the only code that reads or writes the `blogs` collection.

## Wiring

Nothing in this package is a module-level singleton. The application lifespan builds one
`DatabaseManager`, connects it, and constructs the two stores from its collections:

```python
manager = DatabaseManager()
await manager.connect()

identity_store = IdentityStore(manager.get_collection(settings.USERS_COLLECTION))
content_store = ContentStore(manager.get_collection(settings.BLOGS_COLLECTION), identity_store)
```
"""

from blog_platform.database.content_store import ContentStore
from blog_platform.database.identity_store import IdentityStore
from blog_platform.database.manager import DatabaseManager

__all__ = ["ContentStore", "DatabaseManager", "IdentityStore"]
