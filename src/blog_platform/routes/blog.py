"""
# Blog Routes

Authoring and discovery endpoints.

## Discovery (public)

| Endpoint                      | Body                                                   | Response        |
|-------------------------------|--------------------------------------------------------|-----------------|
| `POST /latest-blogs`          | `{page}`                                               | `{blogs}`       |
| `POST /all-latest-blogs-count`| -                                                      | `{totalDocs}`   |
| `GET /trending-blogs`         | -                                                      | `{blogs}`       |
| `POST /search-blogs`          | `{tag?, query?, author?, page, limit?, eliminate_blog?}` | `{blogs}`     |
| `POST /search-blogs-count`    | `{tag?, query?, author?}`                              | `{totalDocs}`   |
| `POST /get-blog`              | `{blog_id}`                                            | `{blog}` / 404  |

Reading a blog through `/get-blog` counts as a read.

## Authoring (Bearer session token)

`POST /create-blog` answers:
- **200** `{id}` when the blog and the author's counters were both written.
- **207** `{id, warning}` when the blog was stored but the author's counters were not. The blog is
  live; the counters are repaired by the reconciliation CLI.
- **400** when a publishing rule fails, naming the rule in `detail`.
"""

from typing import Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from blog_platform.managers.logging_manager import get_logger
from blog_platform.models.blog_models import (
    BlogListResponse,
    BlogResponse,
    CountResponse,
    CreateBlogRequest,
    CreateBlogResponse,
    GetBlogRequest,
    LatestBlogsRequest,
    SearchBlogsRequest,
)
from blog_platform.routes.dependencies import get_current_user_id, get_services, to_http_exception
from blog_platform.services.container import ServiceContainer
from blog_platform.utils.errors import BlogPlatformError

logger = get_logger(prefix="[Blog Routes]")

router = APIRouter(tags=["blogs"])

PARTIAL_PUBLISH_WARNING = "Blog published, but the author's post count could not be updated"


@router.post("/latest-blogs", response_model=BlogListResponse)
async def latest_blogs(
    request: Optional[LatestBlogsRequest] = None,
    services: ServiceContainer = Depends(get_services),
):
    try:
        blogs = await services.discovery.latest_blogs(request.page if request else 1)
        return BlogListResponse(blogs=blogs)
    except BlogPlatformError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to get latest blogs: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get latest blogs")


@router.post("/all-latest-blogs-count", response_model=CountResponse)
async def all_latest_blogs_count(services: ServiceContainer = Depends(get_services)):
    try:
        return CountResponse(totalDocs=await services.discovery.latest_blogs_count())
    except BlogPlatformError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to count latest blogs: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to count blogs")


@router.get("/trending-blogs", response_model=BlogListResponse)
async def trending_blogs(services: ServiceContainer = Depends(get_services)):
    try:
        return BlogListResponse(blogs=await services.discovery.trending_blogs())
    except BlogPlatformError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to get trending blogs: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get trending blogs")


@router.post("/search-blogs", response_model=BlogListResponse)
async def search_blogs(request: SearchBlogsRequest, services: ServiceContainer = Depends(get_services)):
    try:
        blogs = await services.discovery.search_blogs(
            tag=request.tag,
            query=request.query,
            author=request.author,
            page=request.page,
            limit=request.limit,
            eliminate_blog=request.eliminate_blog,
        )
        return BlogListResponse(blogs=blogs)
    except BlogPlatformError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to search blogs: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to search blogs")


@router.post("/search-blogs-count", response_model=CountResponse)
async def search_blogs_count(request: SearchBlogsRequest, services: ServiceContainer = Depends(get_services)):
    try:
        total = await services.discovery.search_blogs_count(
            tag=request.tag, query=request.query, author=request.author
        )
        return CountResponse(totalDocs=total)
    except BlogPlatformError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to count search results: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to count blogs")


@router.post("/create-blog", response_model=CreateBlogResponse, response_model_exclude_none=True)
async def create_blog(
    request: CreateBlogRequest,
    author_id: ObjectId = Depends(get_current_user_id),
    services: ServiceContainer = Depends(get_services),
):
    try:
        result = await services.publishing.publish(author_id, request)
    except BlogPlatformError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to create blog: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create blog")

    if not result.author_synced:
        body = CreateBlogResponse(id=result.blog_id, warning=PARTIAL_PUBLISH_WARNING)
        return JSONResponse(status_code=status.HTTP_207_MULTI_STATUS, content=body.model_dump())

    return CreateBlogResponse(id=result.blog_id)


@router.post("/get-blog", response_model=BlogResponse)
async def get_blog(request: GetBlogRequest, services: ServiceContainer = Depends(get_services)):
    try:
        return BlogResponse(blog=await services.discovery.get_blog(request.blog_id))
    except BlogPlatformError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to get blog: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get blog")
