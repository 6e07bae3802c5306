"""
Inbox SQLAlchemy Models
========================

Messages sent by the public: contact-form submissions and membership
inquiries. Created anonymously, read and managed by administrators.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from gymcms.database import Base
from gymcms.models.common import created_at_column, flag_column


class ContactSubmission(Base):
    __tablename__ = "contact_submissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    subject: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = flag_column(False)
    created_at: Mapped[datetime] = created_at_column()

    def __repr__(self) -> str:
        return f"<ContactSubmission(id={self.id}, email='{self.email}', read={self.is_read})>"


class MembershipInquiry(Base):
    __tablename__ = "membership_inquiries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    plan_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("membership_plans.id", ondelete="SET NULL"), nullable=True
    )
    message: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String(50), nullable=False, default="new", server_default=text("'new'")
    )
    created_at: Mapped[datetime] = created_at_column()

    # Joined from membership_plans by the inquiry listing
    plan_name = None

    def __repr__(self) -> str:
        return f"<MembershipInquiry(id={self.id}, email='{self.email}', status='{self.status}')>"
