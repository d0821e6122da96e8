"""
# Content Store

Data access for the `blogs` collection.

Blogs reference their author by `_id`. When blogs are returned to clients the author is
replaced by its public fields (`personal_info.fullname`, `username`, `profile_img`), fetched
from the `IdentityStore` in one batched query per page.

## Read Counter

`increment_reads()` bumps `activity.total_reads` and returns the post-increment document in a
single `find_one_and_update`, so two concurrent reads always produce two increments. The author
is left as an `_id`; `attach_author()` joins it as a separate query.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from blog_platform.database.identity_store import IdentityStore
from blog_platform.managers.logging_manager import get_logger
from blog_platform.models.blog_models import BLOG_DETAIL_PROJECTION
from blog_platform.utils.errors import ConflictError, DependencyError

logger = get_logger(prefix="[ContentStore]")

SortSpec = Sequence[Tuple[str, int]]


class ContentStore:
    """Store handle for Blog documents."""

    def __init__(self, collection: AsyncIOMotorCollection, identity_store: IdentityStore):
        self.collection = collection
        self.identity_store = identity_store

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a blog and return it with its `_id`.

        Raises:
            ConflictError: If `blog_id` is already taken.
            DependencyError: For any other database failure.
        """
        try:
            result = await self.collection.insert_one(document)
        except DuplicateKeyError as e:
            raise ConflictError(f"Blog id {document.get('blog_id')} already exists") from e
        except PyMongoError as e:
            logger.error("Blog insert failed: %s", e)
            raise DependencyError("Failed to save blog") from e

        document["_id"] = result.inserted_id
        return document

    async def find_blogs(
        self,
        query: Dict[str, Any],
        sort: SortSpec,
        projection: Dict[str, int],
        skip: int = 0,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        """Run a filtered, sorted, paginated query and join author public fields."""
        try:
            cursor = self.collection.find(query, projection).sort(list(sort)).skip(skip)
            if limit:
                cursor = cursor.limit(limit)
            blogs = await cursor.to_list(length=limit or None)
        except PyMongoError as e:
            logger.error("Blog query failed: %s", e)
            raise DependencyError("Failed to load blogs") from e

        return await self._join_authors(blogs)

    async def count(self, query: Dict[str, Any]) -> int:
        try:
            return await self.collection.count_documents(query)
        except PyMongoError as e:
            logger.error("Blog count failed: %s", e)
            raise DependencyError("Failed to count blogs") from e

    async def increment_reads(self, blog_id: str) -> Optional[Dict[str, Any]]:
        """
        Atomically add one read to a blog and return it as stored after the increment.

        `author` is still the raw `_id`. Returns `None` when no blog has this `blog_id`.
        """
        try:
            blog = await self.collection.find_one_and_update(
                {"blog_id": blog_id},
                {"$inc": {"activity.total_reads": 1}},
                projection=BLOG_DETAIL_PROJECTION,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Read increment failed for %s: %s", blog_id, e)
            raise DependencyError("Failed to load blog") from e

        return blog

    async def attach_author(self, blog: Dict[str, Any]) -> Dict[str, Any]:
        """Replace `author` with the author's public fields, `_id` included."""
        joined = await self._join_authors([blog], include_author_id=True)
        return joined[0]

    async def find_by_author(self, author_id: ObjectId) -> List[Dict[str, Any]]:
        """Every blog by an author (drafts included), oldest first."""
        projection = {"_id": 1, "draft": 1, "activity.total_reads": 1}
        try:
            cursor = self.collection.find({"author": author_id}, projection).sort([("publishedAt", 1)])
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            raise DependencyError("Failed to load author blogs") from e

    async def _join_authors(
        self, blogs: List[Dict[str, Any]], include_author_id: bool = False
    ) -> List[Dict[str, Any]]:
        authors = await self.identity_store.get_public_authors(blog.get("author") for blog in blogs)
        for blog in blogs:
            author = authors.get(blog.get("author"))
            if author is None:
                blog["author"] = None
                continue
            public = {"personal_info": author.get("personal_info", {})}
            if include_author_id:
                public["_id"] = author["_id"]
            blog["author"] = public
        return blogs
