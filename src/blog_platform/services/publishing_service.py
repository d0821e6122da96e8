"""
# Publishing Service

Turns an authoring request into a stored blog and keeps the author's counters in step.

## Write Sequence

1. Validate (fixed order, first failure wins).
2. Insert the blog. This is the commit point: once it succeeds the blog exists.
3. Bump `account_info.total_posts` (1 for a published blog, 0 for a draft) and append the blog
   to the author's `blogs` list.

Step 3 is best-effort. When it fails the blog is **not** removed; the result is marked
`author_synced=False`, the failure is logged and counted, and the route answers with a partial
success. `cli.reconcile_cli` repairs the drift later.
"""

from typing import Any, Dict, List

from bson import ObjectId

from blog_platform.database.content_store import ContentStore
from blog_platform.database.identity_store import IdentityStore
from blog_platform.managers.logging_manager import get_logger
from blog_platform.models.blog_models import DESC_MAX_LENGTH, MAX_TAGS, BlogDocument, CreateBlogRequest, PublishResult
from blog_platform.services.metrics import blog_metrics
from blog_platform.utils.errors import ConflictError, DependencyError, ValidationError
from blog_platform.utils.identifiers import build_blog_id

logger = get_logger(prefix="[PublishingService]")

# Fresh slug attempts when the random suffix collides with an existing blog_id
MAX_SLUG_ATTEMPTS = 3


def _has_content_blocks(content: List[Dict[str, Any]]) -> bool:
    return any(isinstance(doc, dict) and doc.get("blocks") for doc in content)


def validate_blog(request: CreateBlogRequest) -> None:
    """
    Check a create request against the publishing rules.

    Drafts only need a title. Raises `ValidationError` naming the first field that fails.
    """
    if not request.title:
        raise ValidationError("title", "You must provide a title")

    if request.draft:
        return

    if not request.desc or len(request.desc) > DESC_MAX_LENGTH:
        raise ValidationError("desc", "You must provide a blog description under 200 characters")
    if not request.banner:
        raise ValidationError("banner", "You must provide blog banner to publish it")
    if not _has_content_blocks(request.content):
        raise ValidationError("content", "There must be some blog content to publish it")
    if not request.tags or len(request.tags) > MAX_TAGS:
        raise ValidationError("tags", "Provide tags to publish it, max 10 tags")


class PublishingService:
    def __init__(self, content_store: ContentStore, identity_store: IdentityStore):
        self.content_store = content_store
        self.identity_store = identity_store

    async def publish(self, author_id: ObjectId, request: CreateBlogRequest) -> PublishResult:
        """
        Validate, store and attribute a blog.

        Returns:
            PublishResult: `author_synced` is `False` when the blog was stored but the author's
            counters could not be updated.

        Raises:
            ValidationError: A publishing rule failed; nothing was written.
            DependencyError: The blog could not be stored; nothing was written.
        """
        validate_blog(request)

        tags = [tag.lower() for tag in request.tags]
        blog = await self._insert_with_fresh_slug(author_id, request, tags)
        blog_metrics.record_publication(request.draft)
        logger.info(f"Stored blog {blog['blog_id']} (draft={request.draft}) for author {author_id}")

        increment = 0 if request.draft else 1
        try:
            matched = await self.identity_store.record_publication(author_id, blog["_id"], increment)
        except DependencyError as e:
            logger.error(f"Failed to update total posts number for author {author_id} after {blog['blog_id']}: {e}")
            blog_metrics.record_secondary_failure("publish")
            return PublishResult(blog_id=blog["blog_id"], author_synced=False)

        if not matched:
            logger.error(f"Author {author_id} not found while attributing blog {blog['blog_id']}")
            blog_metrics.record_secondary_failure("publish")
            return PublishResult(blog_id=blog["blog_id"], author_synced=False)

        return PublishResult(blog_id=blog["blog_id"])

    async def _insert_with_fresh_slug(
        self, author_id: ObjectId, request: CreateBlogRequest, tags: List[str]
    ) -> Dict[str, Any]:
        for attempt in range(1, MAX_SLUG_ATTEMPTS + 1):
            document = BlogDocument(
                blog_id=build_blog_id(request.title),
                title=request.title,
                banner=request.banner,
                desc=request.desc,
                content=request.content,
                tags=tags,
                author=author_id,
                draft=request.draft,
            ).to_mongo()
            try:
                return await self.content_store.insert(document)
            except ConflictError:
                logger.warning(f"blog_id collision on attempt {attempt}/{MAX_SLUG_ATTEMPTS}, retrying")

        raise DependencyError("Failed to allocate a unique blog id")
