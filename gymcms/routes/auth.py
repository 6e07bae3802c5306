"""
GymCMS Backend — Authentication Routes
========================================

    POST /api/auth/login      email + password → {token, user}
    POST /api/auth/logout     journal entry only; the client drops its token
    GET  /api/auth/me         the resolved identity
    PUT  /api/auth/password   {currentPassword, newPassword}

/api/auth/* is behind the per-IP rate limiter.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from gymcms.routes.deps import ADMIN_ERRORS, client_ip, get_session, require_caller
from gymcms.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    PasswordChangeRequest,
    UserSummary,
)
from gymcms.schemas.common import MessageResponse
from gymcms.services.auth_service import CredentialService
from gymcms.services.caller import Caller

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", response_model=LoginResponse, responses=ADMIN_ERRORS)
async def login(
    body: LoginRequest,
    request: Request,
    session: AsyncSession = Depends(get_session),
):
    token, user = await CredentialService(session).login(body.email, body.password, client_ip(request))
    return LoginResponse(token=token, user=UserSummary.model_validate(user))


@router.post("/logout", response_model=MessageResponse, responses=ADMIN_ERRORS)
async def logout(
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    await CredentialService(session).logout(caller)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", responses=ADMIN_ERRORS)
async def me(
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    user = await CredentialService(session).current_user(caller)
    return {"user": MeResponse.model_validate(user).model_dump(mode="json")}


@router.put("/password", response_model=MessageResponse, responses=ADMIN_ERRORS)
async def change_password(
    body: PasswordChangeRequest,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
):
    await CredentialService(session).change_password(caller, body.currentPassword, body.newPassword)
    return MessageResponse(message="Password updated successfully")
