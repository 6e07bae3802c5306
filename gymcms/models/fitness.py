"""
Fitness SQLAlchemy Models
==========================

Trainers, classes, membership plans and testimonials: the records behind
the public marketing pages. Each carries a visibility flag (is_active or
is_approved) and a sort_order used by the default listing order.
"""

import json
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Float, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from gymcms.database import Base
from gymcms.models.common import created_at_column, flag_column, sort_order_column


class Trainer(Base):
    __tablename__ = "trainers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    specialty: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    photo: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    social_facebook: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    social_instagram: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    social_twitter: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    certifications: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_active: Mapped[bool] = flag_column(True)
    sort_order: Mapped[int] = sort_order_column()
    created_at: Mapped[datetime] = created_at_column()

    def __repr__(self) -> str:
        return f"<Trainer(id={self.id}, name='{self.name}')>"


class GymClass(Base):
    """
    A scheduled class.

    trainer_id is a plain integer: deleting a trainer leaves its classes
    pointing at nothing, and readers simply get no trainer details.
    """

    __tablename__ = "classes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    short_description: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    image: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    trainer_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    schedule: Mapped[str] = mapped_column(Text, nullable=False, default="")
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=60)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=20)
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    difficulty: Mapped[str] = mapped_column(String(50), nullable=False, default="intermediate")
    is_active: Mapped[bool] = flag_column(True)
    sort_order: Mapped[int] = sort_order_column()
    created_at: Mapped[datetime] = created_at_column()

    # Filled in by the class service from the referenced trainer (not columns)
    trainer_name = None
    trainer_photo = None
    trainer_specialty = None

    def __repr__(self) -> str:
        return f"<GymClass(id={self.id}, name='{self.name}', trainer_id={self.trainer_id})>"


class MembershipPlan(Base):
    """
    A membership tier.

    features is stored as a JSON array in a text column and exposed as a
    Python list through the `features` property.
    """

    __tablename__ = "membership_plans"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    billing_period: Mapped[str] = mapped_column(
        String(20), nullable=False, default="month", server_default=text("'month'")
    )
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    features_json: Mapped[str] = mapped_column(
        "features", Text, nullable=False, default="[]", server_default=text("'[]'")
    )
    is_featured: Mapped[bool] = flag_column(False)
    is_active: Mapped[bool] = flag_column(True)
    sort_order: Mapped[int] = sort_order_column()
    created_at: Mapped[datetime] = created_at_column()

    @property
    def features(self) -> List[str]:
        if not self.features_json:
            return []
        return list(json.loads(self.features_json))

    @features.setter
    def features(self, value: List[str]) -> None:
        self.features_json = json.dumps(list(value or []))

    def __repr__(self) -> str:
        return f"<MembershipPlan(id={self.id}, name='{self.name}', price={self.price})>"


class Testimonial(Base):
    __tablename__ = "testimonials"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    client_photo: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    client_title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=5, server_default=text("5"))
    is_approved: Mapped[bool] = flag_column(False)
    sort_order: Mapped[int] = sort_order_column()
    created_at: Mapped[datetime] = created_at_column()

    def __repr__(self) -> str:
        return f"<Testimonial(id={self.id}, client='{self.client_name}', approved={self.is_approved})>"
