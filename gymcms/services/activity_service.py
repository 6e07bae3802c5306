"""
GymCMS Backend — Activity Journal
===================================

What:  Append-only audit trail of every mutating action.
Why:   Administrators can see who changed what and from where.
How:   record() adds one ActivityLog row inside the caller's unit of work,
       so a mutation and its journal entry commit or roll back together.
       There is deliberately no update or delete operation.
"""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from gymcms.models import ActivityLog, User
from gymcms.services.caller import Caller
from gymcms.services.results import ListResult

logger = logging.getLogger(__name__)


class ActivityJournal:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def record(
        self,
        caller: Caller,
        action: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
        details: Optional[str] = None,
    ) -> ActivityLog:
        entry = ActivityLog(
            user_id=caller.user_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details,
            ip_address=caller.ip_address,
        )
        self.session.add(entry)
        await self.session.flush()
        logger.info(
            "Activity: user=%s action=%s entity=%s:%s",
            caller.user_id, action, entity_type, entity_id,
        )
        return entry

    async def list_logs(self, limit: int = 50, offset: int = 0) -> ListResult:
        """Newest entries first, each carrying the acting user's name and email."""
        query = (
            select(ActivityLog, User.name, User.email)
            .outerjoin(User, ActivityLog.user_id == User.id)
            .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
            .limit(limit)
            .offset(offset)
        )
        rows = (await self.session.execute(query)).all()
        items = []
        for entry, user_name, user_email in rows:
            entry.user_name = user_name
            entry.user_email = user_email
            items.append(entry)

        total = (
            await self.session.execute(select(func.count()).select_from(ActivityLog))
        ).scalar_one()
        return ListResult(items=items, total=total, limit=limit, offset=offset)
