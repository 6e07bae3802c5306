"""
GymCMS Backend — Blog Routes
==============================

Anonymous callers see posts that are published and whose publish_date has
passed; authenticated callers also see drafts and scheduled posts.

    GET    /api/blog              paginated envelope {items, total, limit, offset}
    GET    /api/blog/categories   distinct categories of published posts
    GET    /api/blog/{slug}
    POST   /api/blog              (admin)
    PUT    /api/blog/{id}         (admin)
    DELETE /api/blog/{id}         (admin)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from gymcms.routes.deps import ADMIN_ERRORS, PUBLIC_ERRORS, get_caller, get_session, require_caller
from gymcms.schemas.common import MessageResponse
from gymcms.schemas.content import PostCreate, PostListResponse, PostResponse, PostUpdate
from gymcms.services.caller import Caller
from gymcms.services.content_service import PostService

router = APIRouter(prefix="/api/blog", tags=["Blog"])


@router.get("", response_model=PostListResponse, summary="List blog posts")
async def list_posts(
    category: Optional[str] = Query(default=None),
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    result = await PostService(session).list(
        caller, filters={"category": category}, limit=limit, offset=offset
    )
    return PostListResponse.from_result(result)


# Declared before /{slug} so "categories" is not taken for a slug
@router.get("/categories", response_model=List[str])
async def list_categories(session: AsyncSession = Depends(get_session)):
    return await PostService(session).categories()


@router.get("/{slug}", response_model=PostResponse, responses=PUBLIC_ERRORS)
async def get_post(
    slug: str,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    return await PostService(session).get_by_slug(slug, caller)


@router.post("", response_model=PostResponse, status_code=201, responses=ADMIN_ERRORS)
async def create_post(
    body: PostCreate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    return await PostService(session).create(body.model_dump(), caller)


@router.put("/{post_id}", response_model=PostResponse, responses=ADMIN_ERRORS)
async def update_post(
    post_id: int,
    body: PostUpdate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    return await PostService(session).update(post_id, body.model_dump(exclude_unset=True), caller)


@router.delete("/{post_id}", response_model=MessageResponse, responses=ADMIN_ERRORS)
async def delete_post(
    post_id: int,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    await PostService(session).delete(post_id, caller)
    return MessageResponse(message="Post deleted successfully")
