"""
# Engagement Service

Records blog reads.

The blog's own `activity.total_reads` is incremented atomically and returned to the reader.
The author's `account_info.total_reads` is updated afterwards in a background task: the
response never waits for it and never fails because of it.
"""

import asyncio
from typing import Any, Dict, Set

from bson import ObjectId

from blog_platform.database.content_store import ContentStore
from blog_platform.database.identity_store import IdentityStore
from blog_platform.managers.logging_manager import get_logger
from blog_platform.services.metrics import blog_metrics
from blog_platform.utils.errors import NotFoundError

logger = get_logger(prefix="[EngagementService]")


class EngagementService:
    def __init__(self, content_store: ContentStore, identity_store: IdentityStore):
        self.content_store = content_store
        self.identity_store = identity_store
        # Strong references so pending author updates are not garbage-collected
        self._pending: Set[asyncio.Task] = set()

    async def record_read(self, blog_id: str) -> Dict[str, Any]:
        """
        Count one read of `blog_id` and return the blog with its author's public profile.

        The returned `activity.total_reads` already includes this read.

        Raises:
            NotFoundError: No blog has this `blog_id`.
        """
        blog = await self.content_store.increment_reads(blog_id)
        if blog is None:
            raise NotFoundError("Blog not found")

        blog_metrics.record_read()
        # Must be scheduled before the author join; a failed join still counts the author read
        author_id = blog.get("author")
        if author_id is not None:
            self._schedule_author_update(author_id)
        return await self.content_store.attach_author(blog)

    def _schedule_author_update(self, author_id: ObjectId) -> None:
        task = asyncio.create_task(self._increment_author_reads(author_id))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _increment_author_reads(self, author_id: ObjectId) -> None:
        try:
            matched = await self.identity_store.increment_total_reads(author_id)
        except Exception as e:
            logger.error(f"Failed to update total reads for author {author_id}: {e}")
            blog_metrics.record_secondary_failure("read")
            return

        if not matched:
            logger.error(f"Author {author_id} not found while counting a read")
            blog_metrics.record_secondary_failure("read")

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def drain(self, timeout: float = 5.0) -> None:
        """Wait for in-flight author updates, e.g. on shutdown."""
        if not self._pending:
            return
        logger.info(f"Waiting for {len(self._pending)} pending author read updates")
        done, pending = await asyncio.wait(set(self._pending), timeout=timeout)
        if pending:
            logger.warning(f"{len(pending)} author read updates did not finish before shutdown")
