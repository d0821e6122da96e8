"""
Service wiring.

`build_services()` is the single place where stores, collaborators and services are put
together. The application lifespan stores the result on `app.state.services`; the tests call
it directly with stores over in-memory collections. The reconciliation CLI only needs the two
stores and builds its `ReconciliationService` itself.
"""

from dataclasses import dataclass
from typing import Optional

from blog_platform.database.content_store import ContentStore
from blog_platform.database.identity_store import IdentityStore
from blog_platform.database.manager import DatabaseManager
from blog_platform.managers.credential_manager import CredentialManager
from blog_platform.managers.storage_manager import StorageManager
from blog_platform.services.discovery_service import DiscoveryService
from blog_platform.services.engagement_service import EngagementService
from blog_platform.services.identity_service import IdentityService
from blog_platform.services.publishing_service import PublishingService


@dataclass
class ServiceContainer:
    identity_store: IdentityStore
    content_store: ContentStore
    credentials: CredentialManager
    storage: StorageManager
    identity: IdentityService
    publishing: PublishingService
    engagement: EngagementService
    discovery: DiscoveryService
    database: Optional[DatabaseManager] = None


def build_services(
    identity_store: IdentityStore,
    content_store: ContentStore,
    credentials: Optional[CredentialManager] = None,
    storage: Optional[StorageManager] = None,
    database: Optional[DatabaseManager] = None,
) -> ServiceContainer:
    credentials = credentials or CredentialManager()
    storage = storage or StorageManager()
    engagement = EngagementService(content_store, identity_store)

    return ServiceContainer(
        identity_store=identity_store,
        content_store=content_store,
        credentials=credentials,
        storage=storage,
        identity=IdentityService(identity_store, credentials),
        publishing=PublishingService(content_store, identity_store),
        engagement=engagement,
        discovery=DiscoveryService(content_store, identity_store, engagement),
        database=database,
    )
