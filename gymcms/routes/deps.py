"""
GymCMS Backend — Route Dependencies
=====================================

What:  FastAPI dependencies shared by every router.
How:   get_session opens one unit of work per request on the Database handle
       stored in app.state. get_caller resolves the Authorization header
       once; require_caller additionally insists on a valid token.

Example:
    @router.post("/trainers")
    async def create(
        body: TrainerCreate,
        session: AsyncSession = Depends(get_session),
        caller: Caller = Depends(require_caller),
    ): ...
"""

from typing import AsyncIterator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from gymcms.database import Database
from gymcms.middleware.request_id import client_address as client_ip
from gymcms.schemas.common import ErrorResponse
from gymcms.services.auth_service import ADMIN_ROLES, CredentialService, require_role
from gymcms.services.caller import Caller
from gymcms.services.storage_service import StorageService


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_storage(request: Request) -> StorageService:
    return request.app.state.storage


async def get_session(db: Database = Depends(get_database)) -> AsyncIterator[AsyncSession]:
    """Commit after the handler returns, roll back if it raises."""
    async with db.session() as session:
        yield session


async def get_caller(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    session: AsyncSession = Depends(get_session),
) -> Caller:
    """Anonymous unless a valid bearer token is presented."""
    caller = await CredentialService(session).resolve_caller(authorization, client_ip(request))
    request.state.caller_id = caller.user_id
    return caller


async def require_caller(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    session: AsyncSession = Depends(get_session),
) -> Caller:
    caller = await CredentialService(session).resolve_caller(
        authorization, client_ip(request), required=True
    )
    request.state.caller_id = caller.user_id
    require_role(caller.identity, ADMIN_ROLES)
    return caller


# ── OpenAPI error documentation ───────────────────────────────────────────
PUBLIC_ERRORS = {404: {"description": "Not found or not visible", "model": ErrorResponse}}
ADMIN_ERRORS = {
    400: {"description": "Validation failed or slug taken", "model": ErrorResponse},
    401: {"description": "Missing, expired or unknown token", "model": ErrorResponse},
    403: {"description": "Malformed token", "model": ErrorResponse},
    404: {"description": "Record not found", "model": ErrorResponse},
}
