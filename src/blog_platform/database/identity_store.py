"""
# Identity Store

Data access for the `users` collection.

All writes that touch counters are single-document atomic updates (`$inc`, `$push`). The store
never combines a write here with a write to `blogs`; callers sequence the two themselves.

Errors from the driver are translated to the domain taxonomy:
- duplicate key on insert -> `ConflictError`
- anything else from PyMongo -> `DependencyError`
"""

import re
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import DuplicateKeyError, PyMongoError

from blog_platform.managers.logging_manager import get_logger
from blog_platform.models.user_models import AUTHOR_PUBLIC_PROJECTION, PROFILE_EXCLUDED_PROJECTION
from blog_platform.utils.errors import ConflictError, DependencyError

logger = get_logger(prefix="[IdentityStore]")


def _duplicate_key_message(error: DuplicateKeyError) -> str:
    key_pattern = (error.details or {}).get("keyPattern") or {}
    if "personal_info.username" in key_pattern or "personal_info.username" in str(error):
        return "Username already taken"
    return "Email already exists"


class IdentityStore:
    """Store handle for User documents."""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def find_by_email(self, email: str, projection: Optional[Dict[str, int]] = None) -> Optional[Dict[str, Any]]:
        try:
            return await self.collection.find_one({"personal_info.email": email}, projection)
        except PyMongoError as e:
            logger.error("Lookup by email failed: %s", e)
            raise DependencyError("Failed to look up user") from e

    async def find_by_username(
        self, username: str, projection: Optional[Dict[str, int]] = None
    ) -> Optional[Dict[str, Any]]:
        try:
            return await self.collection.find_one({"personal_info.username": username}, projection)
        except PyMongoError as e:
            logger.error("Lookup by username failed: %s", e)
            raise DependencyError("Failed to look up user") from e

    async def find_by_id(self, user_id: ObjectId, projection: Optional[Dict[str, int]] = None) -> Optional[Dict[str, Any]]:
        try:
            return await self.collection.find_one({"_id": user_id}, projection)
        except PyMongoError as e:
            logger.error("Lookup by id failed: %s", e)
            raise DependencyError("Failed to look up user") from e

    async def username_exists(self, username: str) -> bool:
        try:
            found = await self.collection.find_one({"personal_info.username": username}, {"_id": 1})
        except PyMongoError as e:
            logger.error("Username existence check failed: %s", e)
            raise DependencyError("Failed to look up user") from e
        return found is not None

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a new user and return it with its `_id`.

        Raises:
            ConflictError: If the email or username is already taken (unique index violation).
            DependencyError: For any other database failure.
        """
        try:
            result = await self.collection.insert_one(document)
        except DuplicateKeyError as e:
            message = _duplicate_key_message(e)
            logger.info("Rejected duplicate user: %s", message)
            raise ConflictError(message) from e
        except PyMongoError as e:
            logger.error("User insert failed: %s", e)
            raise DependencyError("Failed to create user") from e

        document["_id"] = result.inserted_id
        return document

    async def record_publication(self, author_id: ObjectId, blog_object_id: ObjectId, increment: int) -> bool:
        """
        Bump `account_info.total_posts` by `increment` and append the blog to `blogs`.

        Returns:
            bool: `False` when no user matched `author_id`.
        """
        try:
            result = await self.collection.update_one(
                {"_id": author_id},
                {
                    "$inc": {"account_info.total_posts": increment},
                    "$push": {"blogs": blog_object_id},
                    "$set": {"updatedAt": datetime.now(timezone.utc)},
                },
            )
        except PyMongoError as e:
            raise DependencyError("Failed to update total posts number") from e
        return result.matched_count > 0

    async def increment_total_reads(self, author_id: ObjectId, amount: int = 1) -> bool:
        try:
            result = await self.collection.update_one(
                {"_id": author_id}, {"$inc": {"account_info.total_reads": amount}}
            )
        except PyMongoError as e:
            raise DependencyError("Failed to update author read count") from e
        return result.matched_count > 0

    async def search_by_username(self, query: str, limit: int) -> List[Dict[str, Any]]:
        """Case-insensitive substring match on username, public fields only."""
        pattern = {"$regex": re.escape(query), "$options": "i"}
        projection = {**AUTHOR_PUBLIC_PROJECTION, "_id": 0}
        try:
            cursor = self.collection.find({"personal_info.username": pattern}, projection).limit(limit)
            return await cursor.to_list(length=limit)
        except PyMongoError as e:
            logger.error("User search failed: %s", e)
            raise DependencyError("Failed to search users") from e

    async def get_public_profile(self, username: str) -> Optional[Dict[str, Any]]:
        return await self.find_by_username(username, PROFILE_EXCLUDED_PROJECTION)

    async def get_public_authors(self, author_ids: Iterable[ObjectId]) -> Dict[ObjectId, Dict[str, Any]]:
        """Fetch public author fields for a set of ids in one query, keyed by `_id`."""
        unique_ids = list({author_id for author_id in author_ids if author_id is not None})
        if not unique_ids:
            return {}
        projection = {**AUTHOR_PUBLIC_PROJECTION, "_id": 1}
        try:
            cursor = self.collection.find({"_id": {"$in": unique_ids}}, projection)
            authors = await cursor.to_list(length=len(unique_ids))
        except PyMongoError as e:
            logger.error("Author join failed: %s", e)
            raise DependencyError("Failed to load blog authors") from e
        return {author["_id"]: author for author in authors}

    async def iter_user_ids(self) -> AsyncIterator[ObjectId]:
        try:
            async for user in self.collection.find({}, {"_id": 1}):
                yield user["_id"]
        except PyMongoError as e:
            raise DependencyError("Failed to iterate users") from e

    async def set_account_counters(
        self, user_id: ObjectId, total_posts: int, total_reads: int, blogs: List[ObjectId]
    ) -> bool:
        """Overwrite the denormalized counters and blog list with recomputed values."""
        try:
            result = await self.collection.update_one(
                {"_id": user_id},
                {
                    "$set": {
                        "account_info.total_posts": total_posts,
                        "account_info.total_reads": total_reads,
                        "blogs": blogs,
                    }
                },
            )
        except PyMongoError as e:
            raise DependencyError("Failed to reset account counters") from e
        return result.modified_count > 0
