"""
Shared fixtures.

Settings are validated when `blog_platform.config` is imported, so the required values are put in
the environment before any application module is loaded.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-blog-platform")
os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017")

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402

from blog_platform.database.content_store import ContentStore  # noqa: E402
from blog_platform.database.identity_store import IdentityStore  # noqa: E402
from blog_platform.managers.credential_manager import CredentialManager  # noqa: E402
from blog_platform.services.container import build_services  # noqa: E402
from tests.fakes import FakeCollection  # noqa: E402


@pytest.fixture
def users_collection():
    return FakeCollection(unique_fields=["personal_info.email", "personal_info.username"])


@pytest.fixture
def blogs_collection():
    return FakeCollection(unique_fields=["blog_id"])


@pytest.fixture
def identity_store(users_collection):
    return IdentityStore(users_collection)


@pytest.fixture
def content_store(blogs_collection, identity_store):
    return ContentStore(blogs_collection, identity_store)


@pytest.fixture
def credentials():
    return CredentialManager(secret_key="test-secret-key-for-blog-platform", algorithm="HS256", expire_minutes=60)


@pytest.fixture
def storage():
    mock = MagicMock()
    mock.generate_upload_url.return_value = "https://bucket.s3.amazonaws.com/abc-1.jpeg?X-Amz-Signature=sig"
    return mock


@pytest.fixture
def services(identity_store, content_store, credentials, storage):
    container = build_services(identity_store, content_store, credentials=credentials, storage=storage)
    container.database = MagicMock()
    container.database.health_check = AsyncMock(return_value=True)
    return container
