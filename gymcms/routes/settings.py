"""
GymCMS Backend — Settings Routes
==================================

    GET  /api/settings                    flattened {key: value} object
    PUT  /api/settings                    bulk upsert, all-or-nothing      (admin)
    GET  /api/settings/activity/logs      ?limit=50&offset=0               (admin)
    GET  /api/settings/bulletins/active   bulletins inside their window
    GET  /api/settings/{key}
    PUT  /api/settings/{key}              {"value": ...}                   (admin)

The fixed paths are declared before /{key} so they are never read as keys.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from gymcms.routes.deps import ADMIN_ERRORS, PUBLIC_ERRORS, get_session, require_caller
from gymcms.schemas.site import (
    ActivityLogListResponse,
    BulletinResponse,
    SettingResponse,
    SettingValue,
)
from gymcms.services.activity_service import ActivityJournal
from gymcms.services.caller import Caller
from gymcms.services.settings_service import SettingsService

router = APIRouter(prefix="/api/settings", tags=["Settings"])


@router.get("", response_model=Dict[str, str])
async def get_settings(session: AsyncSession = Depends(get_session)):
    return await SettingsService(session).get_all()


@router.put("", response_model=Dict[str, str], responses=ADMIN_ERRORS)
async def update_settings(
    updates: Any = Body(default=None),
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    return await SettingsService(session).bulk_update(updates, caller)


@router.get("/activity/logs", response_model=ActivityLogListResponse, responses=ADMIN_ERRORS)
async def list_activity_logs(
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    result = await ActivityJournal(session).list_logs(limit=limit, offset=offset)
    return ActivityLogListResponse.from_result(result)


@router.get("/bulletins/active", response_model=List[BulletinResponse])
async def active_bulletins(session: AsyncSession = Depends(get_session)):
    return await SettingsService(session).active_bulletins()


@router.get("/{key}", response_model=SettingResponse, responses=PUBLIC_ERRORS)
async def get_setting(key: str, session: AsyncSession = Depends(get_session)):
    setting = await SettingsService(session).get(key)
    return SettingResponse(key=setting.key, value=setting.value)


@router.put("/{key}", response_model=SettingResponse, responses=ADMIN_ERRORS)
async def update_setting(
    key: str,
    body: SettingValue,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    return await SettingsService(session).upsert(key, body.value, caller)
