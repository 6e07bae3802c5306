"""
GymCMS Backend — Media Library Routes
=======================================

Every operation requires a token.

    GET    /api/media          ?type=image|video, ?limit, ?offset
    POST   /api/media          multipart field "files", up to 10 files
    PUT    /api/media/{id}     alt_text only
    DELETE /api/media/{id}     row plus original, WebP and thumbnail files
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from gymcms.routes.deps import ADMIN_ERRORS, get_session, get_storage, require_caller
from gymcms.schemas.common import MessageResponse
from gymcms.schemas.gallery import MediaResponse, MediaUpdate
from gymcms.services.caller import Caller
from gymcms.services.media_service import IncomingFile, MediaService
from gymcms.services.storage_service import StorageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/media", tags=["Media"])


def _service(session: AsyncSession, storage: StorageService) -> MediaService:
    return MediaService(session, storage)


@router.get("", response_model=List[MediaResponse], responses=ADMIN_ERRORS)
async def list_media(
    type: Optional[str] = Query(default=None, description="MIME prefix, e.g. image or video"),
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
    storage: StorageService = Depends(get_storage),
    caller: Caller = Depends(require_caller),
):
    result = await _service(session, storage).list(
        caller, filters={"type": type}, limit=limit, offset=offset
    )
    return result.items


@router.post(
    "",
    response_model=List[MediaResponse],
    status_code=201,
    responses=ADMIN_ERRORS,
    summary="Upload images or videos",
)
async def upload_media(
    files: List[UploadFile] = File(default=[]),
    session: AsyncSession = Depends(get_session),
    storage: StorageService = Depends(get_storage),
    caller: Caller = Depends(require_caller),
):
    incoming = []
    for upload in files:
        incoming.append(
            IncomingFile(
                filename=upload.filename or "",
                content_type=upload.content_type,
                content=await upload.read(),
            )
        )
    return await _service(session, storage).upload(incoming, caller)


@router.put("/{media_id}", response_model=MediaResponse, responses=ADMIN_ERRORS)
async def update_media(
    media_id: int,
    body: MediaUpdate,
    session: AsyncSession = Depends(get_session),
    storage: StorageService = Depends(get_storage),
    caller: Caller = Depends(require_caller),
):
    return await _service(session, storage).update(
        media_id, body.model_dump(exclude_unset=True), caller
    )


@router.delete("/{media_id}", response_model=MessageResponse, responses=ADMIN_ERRORS)
async def delete_media(
    media_id: int,
    session: AsyncSession = Depends(get_session),
    storage: StorageService = Depends(get_storage),
    caller: Caller = Depends(require_caller),
):
    await _service(session, storage).delete(media_id, caller)
    return MessageResponse(message="Media deleted successfully")
