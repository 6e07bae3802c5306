"""
GymCMS Backend — Contact Routes
=================================

    POST   /api/contact                         public contact form
    GET    /api/contact/submissions             ?unread=true&limit=50&offset=0  (admin)
    GET    /api/contact/submissions/{id}                                        (admin)
    PUT    /api/contact/submissions/{id}/read                                   (admin)
    DELETE /api/contact/submissions/{id}                                        (admin)
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from gymcms.routes.deps import ADMIN_ERRORS, get_caller, get_session, require_caller
from gymcms.schemas.common import MessageResponse
from gymcms.schemas.inbox import ContactCreate, SubmissionListResponse, SubmissionResponse
from gymcms.services.caller import Caller
from gymcms.services.inbox_service import ContactService

router = APIRouter(prefix="/api/contact", tags=["Contact"])


@router.post("", status_code=201, responses={400: ADMIN_ERRORS[400]})
async def submit_contact(
    body: ContactCreate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    submission = await ContactService(session).create(body.model_dump(), caller)
    return {
        "message": "Message sent successfully! We will get back to you soon.",
        "id": submission.id,
    }


@router.get("/submissions", response_model=SubmissionListResponse, responses=ADMIN_ERRORS)
async def list_submissions(
    unread: bool = Query(default=False),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    service = ContactService(session)
    result = await service.list_submissions(caller, unread_only=unread, limit=limit, offset=offset)
    return SubmissionListResponse.from_result(result, unread=await service.unread_count())


@router.get("/submissions/{submission_id}", response_model=SubmissionResponse, responses=ADMIN_ERRORS)
async def get_submission(
    submission_id: int,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    return await ContactService(session).get(submission_id, caller)


@router.put("/submissions/{submission_id}/read", response_model=MessageResponse, responses=ADMIN_ERRORS)
async def mark_submission_read(
    submission_id: int,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    await ContactService(session).mark_read(submission_id, caller)
    return MessageResponse(message="Marked as read")


@router.delete("/submissions/{submission_id}", response_model=MessageResponse, responses=ADMIN_ERRORS)
async def delete_submission(
    submission_id: int,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    await ContactService(session).delete(submission_id, caller)
    return MessageResponse(message="Submission deleted successfully")
