"""
GymCMS Backend — Page Routes
==============================

    GET    /api/pages               published pages (all pages for admins)
    GET    /api/pages/{slug_or_id}  single page by slug, falling back to id
    POST   /api/pages               create                         (admin)
    PUT    /api/pages/{id}          partial update                 (admin)
    DELETE /api/pages/{id}          delete                         (admin)
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gymcms.routes.deps import ADMIN_ERRORS, PUBLIC_ERRORS, get_caller, get_session, require_caller
from gymcms.schemas.common import MessageResponse
from gymcms.schemas.content import PageCreate, PageResponse, PageUpdate
from gymcms.services.caller import Caller
from gymcms.services.content_service import PageService

router = APIRouter(prefix="/api/pages", tags=["Pages"])


@router.get("", response_model=List[PageResponse], summary="List pages")
async def list_pages(
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    return (await PageService(session).list(caller)).items


@router.get(
    "/{slug_or_id}",
    response_model=PageResponse,
    responses=PUBLIC_ERRORS,
    summary="Get a page by slug or id",
)
async def get_page(
    slug_or_id: str,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    return await PageService(session).get_by_slug_or_id(slug_or_id, caller)


@router.post("", response_model=PageResponse, status_code=201, responses=ADMIN_ERRORS)
async def create_page(
    body: PageCreate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    return await PageService(session).create(body.model_dump(), caller)


@router.put("/{page_id}", response_model=PageResponse, responses=ADMIN_ERRORS)
async def update_page(
    page_id: int,
    body: PageUpdate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    return await PageService(session).update(page_id, body.model_dump(exclude_unset=True), caller)


@router.delete("/{page_id}", response_model=MessageResponse, responses=ADMIN_ERRORS)
async def delete_page(
    page_id: int,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    await PageService(session).delete(page_id, caller)
    return MessageResponse(message="Page deleted successfully")
