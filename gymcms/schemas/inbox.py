"""Contact submission and membership inquiry contracts."""

from typing import Optional

from pydantic import BaseModel

from gymcms.schemas.common import ListEnvelope, UtcDateTime


class ContactCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None


class SubmissionResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    subject: str
    message: str
    is_read: bool
    created_at: Optional[UtcDateTime] = None

    model_config = {"from_attributes": True}


class SubmissionListResponse(ListEnvelope[SubmissionResponse]):
    unread: int


class InquiryCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    plan_id: Optional[int] = None
    message: Optional[str] = None


class InquiryResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    plan_id: Optional[int] = None
    plan_name: Optional[str] = None
    message: str
    status: str
    created_at: Optional[UtcDateTime] = None

    model_config = {"from_attributes": True}
