"""
Tests for read counting on blogs and authors.
"""
import asyncio
from unittest.mock import AsyncMock

import pytest
from prometheus_client import REGISTRY

from blog_platform.services.engagement_service import EngagementService
from blog_platform.utils.errors import DependencyError, NotFoundError
from tests.factories import make_blog, make_user


@pytest.fixture
def author(users_collection):
    user = make_user("ada")
    users_collection.documents.append(user)
    return user


@pytest.fixture
def blog(blogs_collection, author):
    doc = make_blog(author["_id"], "hello-world-abc", reads=3)
    blogs_collection.documents.append(doc)
    return doc


@pytest.fixture
def engagement_service(content_store, identity_store):
    return EngagementService(content_store, identity_store)


@pytest.mark.asyncio
async def test_record_read_returns_post_increment_blog_with_author(engagement_service, blog, author):
    result = await engagement_service.record_read("hello-world-abc")

    assert result["activity"]["total_reads"] == 4
    assert result["blog_id"] == "hello-world-abc"
    assert "content" in result
    assert "_id" not in result
    assert result["author"]["_id"] == author["_id"]
    assert result["author"]["personal_info"] == {
        "fullname": "Ada",
        "username": "ada",
        "profile_img": "https://img.example.com/ada.svg",
    }
    await engagement_service.drain()


@pytest.mark.asyncio
async def test_author_reads_are_incremented_in_background(engagement_service, blog, users_collection):
    await engagement_service.record_read("hello-world-abc")
    await engagement_service.drain()

    assert users_collection.documents[0]["account_info"]["total_reads"] == 1
    assert engagement_service.pending_count == 0


@pytest.mark.asyncio
async def test_unknown_blog_is_not_found(engagement_service, blog, users_collection, blogs_collection):
    with pytest.raises(NotFoundError):
        await engagement_service.record_read("missing")

    await engagement_service.drain()
    assert users_collection.documents[0]["account_info"]["total_reads"] == 0
    assert blogs_collection.documents[0]["activity"]["total_reads"] == 3


@pytest.mark.asyncio
async def test_author_update_failure_does_not_fail_the_read(engagement_service, identity_store, blog):
    before = REGISTRY.get_sample_value("blog_secondary_update_failures_total", {"operation": "read"}) or 0.0
    identity_store.increment_total_reads = AsyncMock(side_effect=DependencyError("Failed to update author read count"))

    result = await engagement_service.record_read("hello-world-abc")
    await engagement_service.drain()

    assert result["activity"]["total_reads"] == 4
    after = REGISTRY.get_sample_value("blog_secondary_update_failures_total", {"operation": "read"})
    assert after == before + 1


@pytest.mark.asyncio
async def test_concurrent_reads_are_all_counted(engagement_service, blog, blogs_collection, users_collection):
    results = await asyncio.gather(*(engagement_service.record_read("hello-world-abc") for _ in range(10)))
    await engagement_service.drain()

    assert blogs_collection.documents[0]["activity"]["total_reads"] == 13
    assert users_collection.documents[0]["account_info"]["total_reads"] == 10
    assert sorted(result["activity"]["total_reads"] for result in results) == list(range(4, 14))


@pytest.mark.asyncio
async def test_drain_without_pending_tasks_returns_immediately(engagement_service):
    await engagement_service.drain()
    assert engagement_service.pending_count == 0


@pytest.mark.asyncio
async def test_author_join_failure_still_counts_author_read(
    engagement_service, identity_store, blog, users_collection, blogs_collection
):
    identity_store.get_public_authors = AsyncMock(side_effect=DependencyError("Failed to load blog authors"))

    with pytest.raises(DependencyError):
        await engagement_service.record_read("hello-world-abc")
    await engagement_service.drain()

    assert blogs_collection.documents[0]["activity"]["total_reads"] == 4
    assert users_collection.documents[0]["account_info"]["total_reads"] == 1
