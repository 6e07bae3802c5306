"""
GymCMS Backend — Testimonial Routes
=====================================

Anonymous callers only see approved testimonials.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gymcms.routes.deps import ADMIN_ERRORS, PUBLIC_ERRORS, get_caller, get_session, require_caller
from gymcms.schemas.common import MessageResponse
from gymcms.schemas.fitness import TestimonialCreate, TestimonialResponse, TestimonialUpdate
from gymcms.services.caller import Caller
from gymcms.services.fitness_service import TestimonialService

router = APIRouter(prefix="/api/testimonials", tags=["Testimonials"])


@router.get("", response_model=List[TestimonialResponse])
async def list_testimonials(
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    return (await TestimonialService(session).list(caller)).items


@router.get("/{testimonial_id}", response_model=TestimonialResponse, responses=PUBLIC_ERRORS)
async def get_testimonial(
    testimonial_id: int,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    return await TestimonialService(session).get(testimonial_id, caller)


@router.post("", response_model=TestimonialResponse, status_code=201, responses=ADMIN_ERRORS)
async def create_testimonial(
    body: TestimonialCreate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    return await TestimonialService(session).create(body.model_dump(), caller)


@router.put("/{testimonial_id}", response_model=TestimonialResponse, responses=ADMIN_ERRORS)
async def update_testimonial(
    testimonial_id: int,
    body: TestimonialUpdate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    return await TestimonialService(session).update(
        testimonial_id, body.model_dump(exclude_unset=True), caller
    )


@router.delete("/{testimonial_id}", response_model=MessageResponse, responses=ADMIN_ERRORS)
async def delete_testimonial(
    testimonial_id: int,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    await TestimonialService(session).delete(testimonial_id, caller)
    return MessageResponse(message="Testimonial deleted successfully")
