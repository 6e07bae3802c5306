"""
GymCMS Backend — Membership Routes
====================================

    GET    /api/membership                  active plans (all for admins)
    GET    /api/membership/inquiries/all    inquiries with plan name    (admin)
    POST   /api/membership/inquiry          public inquiry form
    GET    /api/membership/{id}
    POST   /api/membership                  (admin)
    PUT    /api/membership/{id}             (admin)
    DELETE /api/membership/{id}             (admin)

`features` is always a JSON list on the wire.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gymcms.routes.deps import ADMIN_ERRORS, PUBLIC_ERRORS, get_caller, get_session, require_caller
from gymcms.schemas.common import MessageResponse
from gymcms.schemas.fitness import PlanCreate, PlanResponse, PlanUpdate
from gymcms.schemas.inbox import InquiryCreate, InquiryResponse
from gymcms.services.caller import Caller
from gymcms.services.fitness_service import PlanService
from gymcms.services.inbox_service import InquiryService

router = APIRouter(prefix="/api/membership", tags=["Membership"])


@router.get("", response_model=List[PlanResponse])
async def list_plans(
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    return (await PlanService(session).list(caller)).items


# ── Inquiries (declared before /{plan_id}) ───────────────────────────────


@router.post("/inquiry", status_code=201)
async def submit_inquiry(
    body: InquiryCreate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    inquiry = await InquiryService(session).create(body.model_dump(), caller)
    return {"message": "Inquiry submitted successfully", "id": inquiry.id}


@router.get("/inquiries/all", response_model=List[InquiryResponse], responses=ADMIN_ERRORS)
async def list_inquiries(
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    return (await InquiryService(session).list(caller)).items


# ── Plans ─────────────────────────────────────────────────────────────────


@router.get("/{plan_id}", response_model=PlanResponse, responses=PUBLIC_ERRORS)
async def get_plan(
    plan_id: int,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    return await PlanService(session).get(plan_id, caller)


@router.post("", response_model=PlanResponse, status_code=201, responses=ADMIN_ERRORS)
async def create_plan(
    body: PlanCreate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    return await PlanService(session).create(body.model_dump(), caller)


@router.put("/{plan_id}", response_model=PlanResponse, responses=ADMIN_ERRORS)
async def update_plan(
    plan_id: int,
    body: PlanUpdate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    return await PlanService(session).update(plan_id, body.model_dump(exclude_unset=True), caller)


@router.delete("/{plan_id}", response_model=MessageResponse, responses=ADMIN_ERRORS)
async def delete_plan(
    plan_id: int,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    await PlanService(session).delete(plan_id, caller)
    return MessageResponse(message="Plan deleted successfully")
