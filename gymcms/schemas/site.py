"""Settings, bulletin and activity log contracts."""

from typing import Any, Optional

from pydantic import BaseModel

from gymcms.schemas.common import ListEnvelope, UtcDateTime


class SettingValue(BaseModel):
    value: Any = None


class SettingResponse(BaseModel):
    key: str
    value: str


class BulletinResponse(BaseModel):
    id: int
    title: str
    content: str
    priority: str
    starts_at: Optional[UtcDateTime] = None
    expires_at: Optional[UtcDateTime] = None
    is_active: bool
    created_at: Optional[UtcDateTime] = None

    model_config = {"from_attributes": True}


class ActivityLogResponse(BaseModel):
    id: int
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    action: str
    entity_type: Optional[str] = None
    entity_id: Optional[int] = None
    details: Optional[str] = None
    ip_address: Optional[str] = None
    created_at: Optional[UtcDateTime] = None

    model_config = {"from_attributes": True}


class ActivityLogListResponse(ListEnvelope[ActivityLogResponse]):
    pass
