"""
# Discovery Service

Read-only feeds over published blogs and public user data.

## Feeds

| Feed     | Filter                      | Order                                             | Size |
|----------|-----------------------------|---------------------------------------------------|------|
| latest   | `draft: false`              | `publishedAt` desc                                | 5/page |
| trending | `draft: false`              | `total_reads` desc, `total_likes` desc, `publishedAt` desc | 5 |
| search   | one of tag / query / author | `publishedAt` desc                                | `limit` or 5 /page |

## Search Filter Precedence

Exactly one filter is applied, chosen as `tag` > `query` > `author`. Supplying several is not an
error; the lower-precedence ones are ignored. `eliminate_blog` only narrows tag searches (the
"more like this" strip under a blog) and is not applied to counts.

All results pass through `serialize_document`, so ObjectIds and datetimes leave as strings.
"""

import re
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING

from blog_platform.config import settings
from blog_platform.database.content_store import ContentStore
from blog_platform.database.identity_store import IdentityStore
from blog_platform.database.serialization import coerce_object_id, serialize_document
from blog_platform.managers.logging_manager import get_logger
from blog_platform.models.blog_models import BLOG_CARD_PROJECTION, TRENDING_PROJECTION
from blog_platform.services.engagement_service import EngagementService
from blog_platform.utils.errors import NotFoundError, ValidationError

logger = get_logger(prefix="[DiscoveryService]")

PUBLISHED = {"draft": False}
LATEST_SORT = [("publishedAt", DESCENDING)]
TRENDING_SORT = [
    ("activity.total_reads", DESCENDING),
    ("activity.total_likes", DESCENDING),
    ("publishedAt", DESCENDING),
]

# Sentinel filter for an author id that cannot exist
_NO_MATCH: Dict[str, Any] = {"_id": {"$in": []}}


def _skip_for(page: int, page_size: int) -> int:
    return (max(page, 1) - 1) * page_size


def build_search_filter(
    tag: Optional[str] = None,
    query: Optional[str] = None,
    author: Optional[str] = None,
    eliminate_blog: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build the MongoDB filter for a blog search.

    A search with no filter is rejected instead of falling through to an unfiltered query, which
    would match every blog including drafts.

    Raises:
        ValidationError: If none of `tag`, `query`, `author` is given.
    """
    if tag:
        search: Dict[str, Any] = {**PUBLISHED, "tags": tag.lower()}
        if eliminate_blog:
            search["blog_id"] = {"$ne": eliminate_blog}
        return search

    if query:
        return {**PUBLISHED, "title": {"$regex": re.escape(query), "$options": "i"}}

    if author:
        author_id = coerce_object_id(author)
        if author_id is None:
            return {**PUBLISHED, **_NO_MATCH}
        return {**PUBLISHED, "author": author_id}

    raise ValidationError("query", "Provide a tag, query or author to search")


class DiscoveryService:
    def __init__(
        self,
        content_store: ContentStore,
        identity_store: IdentityStore,
        engagement_service: EngagementService,
    ):
        self.content_store = content_store
        self.identity_store = identity_store
        self.engagement_service = engagement_service
        self.page_size = settings.BLOGS_PAGE_SIZE

    async def latest_blogs(self, page: int = 1) -> List[Dict[str, Any]]:
        blogs = await self.content_store.find_blogs(
            PUBLISHED,
            LATEST_SORT,
            BLOG_CARD_PROJECTION,
            skip=_skip_for(page, self.page_size),
            limit=self.page_size,
        )
        return serialize_document(blogs)

    async def latest_blogs_count(self) -> int:
        return await self.content_store.count(PUBLISHED)

    async def trending_blogs(self) -> List[Dict[str, Any]]:
        blogs = await self.content_store.find_blogs(
            PUBLISHED, TRENDING_SORT, TRENDING_PROJECTION, limit=settings.TRENDING_LIMIT
        )
        return serialize_document(blogs)

    async def search_blogs(
        self,
        tag: Optional[str] = None,
        query: Optional[str] = None,
        author: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
        eliminate_blog: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Paginated search, newest first. Page size is `limit` when given, else the default."""
        search = build_search_filter(tag=tag, query=query, author=author, eliminate_blog=eliminate_blog)
        page_size = limit or self.page_size
        blogs = await self.content_store.find_blogs(
            search,
            LATEST_SORT,
            BLOG_CARD_PROJECTION,
            skip=_skip_for(page, page_size),
            limit=page_size,
        )
        return serialize_document(blogs)

    async def search_blogs_count(
        self, tag: Optional[str] = None, query: Optional[str] = None, author: Optional[str] = None
    ) -> int:
        return await self.content_store.count(build_search_filter(tag=tag, query=query, author=author))

    async def search_users(self, query: str) -> List[Dict[str, Any]]:
        users = await self.identity_store.search_by_username(query or "", settings.USER_SEARCH_LIMIT)
        return serialize_document(users)

    async def get_profile(self, username: str) -> Dict[str, Any]:
        """
        Public profile for `username`: everything except password, auth method, `updatedAt`
        and the blog list.

        Raises:
            NotFoundError: No such user.
        """
        user = await self.identity_store.get_public_profile(username)
        if user is None:
            raise NotFoundError("User not found")
        return serialize_document(user)

    async def get_blog(self, blog_id: str) -> Dict[str, Any]:
        """Full blog for the reader; counts as a read."""
        blog = await self.engagement_service.record_read(blog_id)
        return serialize_document(blog)
