"""
GymCMS Backend — Gallery Routes
=================================

    GET    /api/gallery/albums          active albums with image_count
    GET    /api/gallery/albums/{id}     album with its images
    POST   /api/gallery/albums          (admin)
    PUT    /api/gallery/albums/{id}     (admin)
    DELETE /api/gallery/albums/{id}     (admin, images go with it)

    GET    /api/gallery/images          optionally ?album_id=
    POST   /api/gallery/images          (admin)
    PUT    /api/gallery/images/{id}     (admin)
    DELETE /api/gallery/images/{id}     (admin)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from gymcms.routes.deps import ADMIN_ERRORS, PUBLIC_ERRORS, get_caller, get_session, require_caller
from gymcms.schemas.common import MessageResponse
from gymcms.schemas.gallery import (
    AlbumCreate,
    AlbumDetailResponse,
    AlbumResponse,
    AlbumUpdate,
    ImageCreate,
    ImageResponse,
    ImageUpdate,
)
from gymcms.services.caller import Caller
from gymcms.services.gallery_service import AlbumService, ImageService

router = APIRouter(prefix="/api/gallery", tags=["Gallery"])


# ══════════════════════════════════════════════════════════════════════════
# Albums
# ══════════════════════════════════════════════════════════════════════════


@router.get("/albums", response_model=List[AlbumResponse])
async def list_albums(
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    return (await AlbumService(session).list(caller)).items


@router.get("/albums/{album_id}", response_model=AlbumDetailResponse, responses=PUBLIC_ERRORS)
async def get_album(
    album_id: int,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    return await AlbumService(session).get_with_images(album_id, caller)


@router.post("/albums", response_model=AlbumResponse, status_code=201, responses=ADMIN_ERRORS)
async def create_album(
    body: AlbumCreate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    return await AlbumService(session).create(body.model_dump(), caller)


@router.put("/albums/{album_id}", response_model=AlbumResponse, responses=ADMIN_ERRORS)
async def update_album(
    album_id: int,
    body: AlbumUpdate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    return await AlbumService(session).update(album_id, body.model_dump(exclude_unset=True), caller)


@router.delete("/albums/{album_id}", response_model=MessageResponse, responses=ADMIN_ERRORS)
async def delete_album(
    album_id: int,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    await AlbumService(session).delete(album_id, caller)
    return MessageResponse(message="Album deleted successfully")


# ══════════════════════════════════════════════════════════════════════════
# Images
# ══════════════════════════════════════════════════════════════════════════


@router.get("/images", response_model=List[ImageResponse])
async def list_images(
    album_id: Optional[int] = Query(default=None),
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    result = await ImageService(session).list(caller, filters={"album_id": album_id})
    return result.items


@router.post("/images", response_model=ImageResponse, status_code=201, responses=ADMIN_ERRORS)
async def create_image(
    body: ImageCreate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    return await ImageService(session).create(body.model_dump(exclude_unset=True), caller)


@router.put("/images/{image_id}", response_model=ImageResponse, responses=ADMIN_ERRORS)
async def update_image(
    image_id: int,
    body: ImageUpdate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    return await ImageService(session).update(image_id, body.model_dump(exclude_unset=True), caller)


@router.delete("/images/{image_id}", response_model=MessageResponse, responses=ADMIN_ERRORS)
async def delete_image(
    image_id: int,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    await ImageService(session).delete(image_id, caller)
    return MessageResponse(message="Image deleted successfully")
