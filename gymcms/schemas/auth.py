"""Login, identity and password-change contracts."""

from typing import Optional

from pydantic import BaseModel

from gymcms.schemas.common import UtcDateTime


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserSummary(BaseModel):
    id: int
    email: str
    name: str
    role: str

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    token: str
    user: UserSummary


class MeResponse(UserSummary):
    created_at: Optional[UtcDateTime] = None
    last_login: Optional[UtcDateTime] = None


class PasswordChangeRequest(BaseModel):
    currentPassword: Optional[str] = None
    newPassword: Optional[str] = None
