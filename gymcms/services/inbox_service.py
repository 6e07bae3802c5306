"""
GymCMS Backend — Contact & Inquiry Services
=============================================

What:  Messages from the public website.
How:   Created anonymously (the journal entry has no user), then listed,
       read, marked read and deleted by administrators. There is no update
       of message content.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import func, select

from gymcms.exceptions import ValidationError
from gymcms.models import ContactSubmission, MembershipInquiry, MembershipPlan
from gymcms.services.caller import Caller
from gymcms.services.repository import Repository
from gymcms.services.results import ListResult

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def validate_email(email: str) -> str:
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email address", field="email")
    return email


class ContactService(Repository[ContactSubmission]):
    model = ContactSubmission
    entity_type = "contact_submission"
    label = "Submission"
    noun = "contact from"
    required_fields = ("name", "email", "message")
    required_message = "Name, email, and message are required"
    filters = {
        "unread": lambda value: ContactSubmission.is_read.is_(False),
    }

    def _order_clauses(self) -> Sequence:
        return (ContactSubmission.created_at.desc(),)

    def describe(self, action: str, entity: ContactSubmission) -> str:
        if action == "create":
            return f"New contact from: {entity.name}"
        return super().describe(action, entity)

    async def _normalize(
        self, fields: Dict[str, Any], existing: Optional[ContactSubmission], caller: Caller
    ) -> Dict[str, Any]:
        if "email" in fields:
            fields["email"] = validate_email(fields["email"].strip())
        return fields

    async def unread_count(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(ContactSubmission).where(ContactSubmission.is_read.is_(False))
        )
        return result.scalar_one()

    async def list_submissions(
        self,
        caller: Caller,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> ListResult:
        return await self.list(
            caller,
            filters={"unread": True} if unread_only else None,
            limit=limit,
            offset=offset,
        )

    async def mark_read(self, submission_id: int, caller: Caller) -> ContactSubmission:
        submission = await self._load(submission_id)
        if not submission.is_read:
            submission.is_read = True
            await self._flush("update")
            await self.journal.record(
                caller, "update", self.entity_type, submission.id,
                f"Marked contact as read from: {submission.name}",
            )
        return submission


class InquiryService(Repository[MembershipInquiry]):
    model = MembershipInquiry
    entity_type = "membership_inquiry"
    label = "Inquiry"
    noun = "inquiry from"
    required_fields = ("name", "email")
    required_message = "Name and email are required"
    nullable_fields = frozenset({"plan_id"})

    def _order_clauses(self) -> Sequence:
        return (MembershipInquiry.created_at.desc(),)

    def describe(self, action: str, entity: MembershipInquiry) -> str:
        if action == "create":
            return f"New membership inquiry from: {entity.name}"
        return super().describe(action, entity)

    async def _normalize(
        self, fields: Dict[str, Any], existing: Optional[MembershipInquiry], caller: Caller
    ) -> Dict[str, Any]:
        if "email" in fields:
            fields["email"] = validate_email(fields["email"].strip())
        plan_id = fields.get("plan_id")
        if plan_id is not None and await self.session.get(MembershipPlan, plan_id) is None:
            raise ValidationError("Selected plan does not exist", field="plan_id")
        return fields

    async def _decorate(self, items: List[MembershipInquiry]) -> List[MembershipInquiry]:
        plan_ids = {item.plan_id for item in items if item.plan_id is not None}
        names: Dict[int, str] = {}
        if plan_ids:
            result = await self.session.execute(
                select(MembershipPlan.id, MembershipPlan.name).where(MembershipPlan.id.in_(plan_ids))
            )
            names = dict(result.all())
        for item in items:
            item.plan_name = names.get(item.plan_id)
        return items
