"""
# Blog Models

Request, response and document models for blog content and discovery.

## Publishing Rules

A blog saved with `draft=true` only needs a title. Publishing (`draft=false`) additionally
requires, checked in this order:

1. `desc` present and at most 200 characters
2. `banner` present
3. `content` with at least one editor block
4. between 1 and 10 `tags`

The rules are applied by `PublishingService`, not by Pydantic, so the first failing field is
reported on its own instead of a list of errors.

## Content Shape

`content` is the block editor output. The client may send a single document
(`{"time": ..., "blocks": [...], "version": ...}`) or a list of such documents; it is stored as
a list.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

DESC_MAX_LENGTH: int = 200
MAX_TAGS: int = 10

# Projection used by the latest and search feeds
BLOG_CARD_PROJECTION: Dict[str, int] = {
    "blog_id": 1,
    "title": 1,
    "desc": 1,
    "banner": 1,
    "activity": 1,
    "tags": 1,
    "publishedAt": 1,
    "author": 1,
    "_id": 0,
}

# Trending only needs enough to render a numbered list
TRENDING_PROJECTION: Dict[str, int] = {
    "blog_id": 1,
    "title": 1,
    "publishedAt": 1,
    "author": 1,
    "_id": 0,
}

# Full blog page
BLOG_DETAIL_PROJECTION: Dict[str, int] = {
    "blog_id": 1,
    "title": 1,
    "desc": 1,
    "content": 1,
    "banner": 1,
    "activity": 1,
    "publishedAt": 1,
    "tags": 1,
    "author": 1,
    "_id": 0,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Request Models
class CreateBlogRequest(BaseModel):
    """Body of `POST /create-blog`."""

    title: str = ""
    banner: str = ""
    desc: str = ""
    tags: List[str] = Field(default_factory=list)
    content: Union[List[Dict[str, Any]], Dict[str, Any]] = Field(default_factory=list)
    draft: bool = False

    @field_validator("content")
    @classmethod
    def normalize_content(cls, v):
        if isinstance(v, dict):
            return [v] if v else []
        return v

    @field_validator("draft", mode="before")
    @classmethod
    def coerce_draft(cls, v):
        # The editor sends null/undefined for "not a draft"
        return bool(v)


class LatestBlogsRequest(BaseModel):
    page: int = 1


class SearchBlogsRequest(BaseModel):
    """
    Body of `POST /search-blogs` and `POST /search-blogs-count`.

    Only one filter applies, chosen by precedence `tag` > `query` > `author`.
    `eliminate_blog` is only honoured together with `tag` ("more like this").
    `limit` of 0 or unset means the default page size.
    """

    tag: Optional[str] = None
    query: Optional[str] = None
    author: Optional[str] = None
    page: int = 1
    limit: Optional[int] = Field(None, ge=0)
    eliminate_blog: Optional[str] = None


class GetBlogRequest(BaseModel):
    blog_id: str = ""


# Response Models
class BlogListResponse(BaseModel):
    blogs: List[Dict[str, Any]]


class CountResponse(BaseModel):
    totalDocs: int


class CreateBlogResponse(BaseModel):
    """`warning` is only set when the author's counters could not be updated."""

    id: str
    warning: Optional[str] = None


class BlogResponse(BaseModel):
    blog: Dict[str, Any]


class UploadUrlResponse(BaseModel):
    uploadURL: str


# Database Schema Models (for internal use)
class BlogActivity(BaseModel):
    total_likes: int = Field(default=0, ge=0)
    total_comments: int = Field(default=0, ge=0)
    total_reads: int = Field(default=0, ge=0)
    total_parent_comments: int = Field(default=0, ge=0)


class BlogDocument(BaseModel):
    """
    MongoDB document model for the `blogs` collection.

    `blog_id` is the public, URL-safe identifier; `_id` stays internal and is what the
    author's `blogs` list references.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    blog_id: str
    title: str
    banner: str = ""
    desc: str = ""
    content: List[Dict[str, Any]] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    author: ObjectId
    activity: BlogActivity = Field(default_factory=BlogActivity)
    comments: List[ObjectId] = Field(default_factory=list)
    draft: bool = False
    publishedAt: datetime = Field(default_factory=_utcnow)
    updatedAt: datetime = Field(default_factory=_utcnow)

    def to_mongo(self) -> Dict[str, Any]:
        return self.model_dump()


class PublishResult(BaseModel):
    """Outcome of the publishing pipeline. `author_synced=False` marks a partial failure."""

    blog_id: str
    author_synced: bool = True
