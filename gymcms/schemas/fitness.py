"""Trainer, class, membership plan and testimonial contracts."""

from typing import Any, List, Optional

from pydantic import BaseModel

from gymcms.schemas.common import UtcDateTime


# ── Trainers ──────────────────────────────────────────────────────────────


class TrainerCreate(BaseModel):
    name: Optional[str] = None
    specialty: Optional[str] = None
    bio: Optional[str] = None
    photo: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    social_facebook: Optional[str] = None
    social_instagram: Optional[str] = None
    social_twitter: Optional[str] = None
    certifications: Optional[str] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class TrainerUpdate(TrainerCreate):
    pass


class TrainerResponse(BaseModel):
    id: int
    name: str
    specialty: str
    bio: str
    photo: str
    email: str
    phone: str
    social_facebook: str
    social_instagram: str
    social_twitter: str
    certifications: str
    is_active: bool
    sort_order: int
    created_at: Optional[UtcDateTime] = None

    model_config = {"from_attributes": True}


# ── Classes ───────────────────────────────────────────────────────────────


class ClassCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    short_description: Optional[str] = None
    image: Optional[str] = None
    trainer_id: Optional[int] = None
    schedule: Optional[str] = None
    duration: Optional[int] = None
    capacity: Optional[int] = None
    price: Optional[float] = None
    difficulty: Optional[str] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class ClassUpdate(ClassCreate):
    pass


class ClassResponse(BaseModel):
    id: int
    name: str
    description: str
    short_description: str
    image: str
    trainer_id: Optional[int] = None
    schedule: str
    duration: int
    capacity: int
    price: float
    difficulty: str
    is_active: bool
    sort_order: int
    created_at: Optional[UtcDateTime] = None
    trainer_name: Optional[str] = None
    trainer_photo: Optional[str] = None
    trainer_specialty: Optional[str] = None

    model_config = {"from_attributes": True}


# ── Membership plans ──────────────────────────────────────────────────────


class PlanCreate(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = None
    billing_period: Optional[str] = None
    description: Optional[str] = None
    # A list, or a JSON-encoded list from older admin clients
    features: Optional[Any] = None
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class PlanUpdate(PlanCreate):
    pass


class PlanResponse(BaseModel):
    id: int
    name: str
    price: float
    billing_period: str
    description: str
    features: List[str]
    is_featured: bool
    is_active: bool
    sort_order: int
    created_at: Optional[UtcDateTime] = None

    model_config = {"from_attributes": True}


# ── Testimonials ──────────────────────────────────────────────────────────


class TestimonialCreate(BaseModel):
    client_name: Optional[str] = None
    client_photo: Optional[str] = None
    client_title: Optional[str] = None
    content: Optional[str] = None
    rating: Optional[int] = None
    is_approved: Optional[bool] = None
    sort_order: Optional[int] = None


class TestimonialUpdate(TestimonialCreate):
    pass


class TestimonialResponse(BaseModel):
    id: int
    client_name: str
    client_photo: str
    client_title: str
    content: str
    rating: int
    is_approved: bool
    sort_order: int
    created_at: Optional[UtcDateTime] = None

    model_config = {"from_attributes": True}
