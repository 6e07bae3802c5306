"""
GymCMS Backend — Trainer & Class Routes
=========================================

Both collections hide inactive records from anonymous callers.

    /api/trainers[/{id}]   GET list/get, POST, PUT, DELETE
    /api/classes[/{id}]    GET list/get (with trainer name and photo), POST, PUT, DELETE
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gymcms.routes.deps import ADMIN_ERRORS, PUBLIC_ERRORS, get_caller, get_session, require_caller
from gymcms.schemas.common import MessageResponse
from gymcms.schemas.fitness import (
    ClassCreate,
    ClassResponse,
    ClassUpdate,
    TrainerCreate,
    TrainerResponse,
    TrainerUpdate,
)
from gymcms.services.caller import Caller
from gymcms.services.fitness_service import ClassService, TrainerService

trainers_router = APIRouter(prefix="/api/trainers", tags=["Trainers"])
classes_router = APIRouter(prefix="/api/classes", tags=["Classes"])


# ══════════════════════════════════════════════════════════════════════════
# Trainers
# ══════════════════════════════════════════════════════════════════════════


@trainers_router.get("", response_model=List[TrainerResponse])
async def list_trainers(
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    return (await TrainerService(session).list(caller)).items


@trainers_router.get("/{trainer_id}", response_model=TrainerResponse, responses=PUBLIC_ERRORS)
async def get_trainer(
    trainer_id: int,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    return await TrainerService(session).get(trainer_id, caller)


@trainers_router.post("", response_model=TrainerResponse, status_code=201, responses=ADMIN_ERRORS)
async def create_trainer(
    body: TrainerCreate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    return await TrainerService(session).create(body.model_dump(), caller)


@trainers_router.put("/{trainer_id}", response_model=TrainerResponse, responses=ADMIN_ERRORS)
async def update_trainer(
    trainer_id: int,
    body: TrainerUpdate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    return await TrainerService(session).update(
        trainer_id, body.model_dump(exclude_unset=True), caller
    )


@trainers_router.delete("/{trainer_id}", response_model=MessageResponse, responses=ADMIN_ERRORS)
async def delete_trainer(
    trainer_id: int,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    await TrainerService(session).delete(trainer_id, caller)
    return MessageResponse(message="Trainer deleted successfully")


# ══════════════════════════════════════════════════════════════════════════
# Classes
# ══════════════════════════════════════════════════════════════════════════


@classes_router.get("", response_model=List[ClassResponse])
async def list_classes(
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    return (await ClassService(session).list(caller)).items


@classes_router.get("/{class_id}", response_model=ClassResponse, responses=PUBLIC_ERRORS)
async def get_class(
    class_id: int,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    return await ClassService(session).get(class_id, caller)


@classes_router.post("", response_model=ClassResponse, status_code=201, responses=ADMIN_ERRORS)
async def create_class(
    body: ClassCreate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    return await ClassService(session).create(body.model_dump(exclude_unset=True), caller)


@classes_router.put("/{class_id}", response_model=ClassResponse, responses=ADMIN_ERRORS)
async def update_class(
    class_id: int,
    body: ClassUpdate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    return await ClassService(session).update(class_id, body.model_dump(exclude_unset=True), caller)


@classes_router.delete("/{class_id}", response_model=MessageResponse, responses=ADMIN_ERRORS)
async def delete_class(
    class_id: int,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    await ClassService(session).delete(class_id, caller)
    return MessageResponse(message="Class deleted successfully")
