"""
GymCMS Backend — Settings Store & Bulletins
=============================================

What:  Key/value site settings with insert-or-replace semantics, plus the
       public listing of currently running bulletins.

Upsert:
    Settings are addressed by key, never by id. Writing a key inserts it
    or replaces its value (ON CONFLICT (key) DO UPDATE). A bulk update is a
    single multi-row INSERT ... ON CONFLICT statement, so either every key
    is written or none is.

Values are stored as text. Non-string JSON values are stringified the way
the admin UI expects: booleans become "true"/"false", numbers their
decimal form.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import or_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gymcms.exceptions import DatabaseError, NotFoundError, ValidationError
from gymcms.models import Bulletin, Setting
from gymcms.models.common import utcnow
from gymcms.services.activity_service import ActivityJournal
from gymcms.services.caller import Caller

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def stringify_setting(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


class SettingsService:
    entity_type = "settings"

    def __init__(self, session: AsyncSession, journal: Optional[ActivityJournal] = None):
        self.session = session
        self.journal = journal or ActivityJournal(session)

    async def get_all(self) -> Dict[str, str]:
        result = await self.session.execute(select(Setting.key, Setting.value).order_by(Setting.key))
        return {key: value for key, value in result.all()}

    async def get(self, key: str) -> Setting:
        setting = (
            await self.session.execute(
                select(Setting)
                .where(Setting.key == key)
                .execution_options(populate_existing=True)
            )
        ).scalar_one_or_none()
        if setting is None:
            raise NotFoundError("Setting", key)
        return setting

    async def _upsert_rows(self, rows: List[Dict[str, str]]) -> None:
        dialect = self.session.get_bind().dialect.name
        insert = _INSERT_BY_DIALECT.get(dialect)
        if insert is None:
            raise DatabaseError(
                message="Settings cannot be written on this database backend",
                context={"dialect": dialect},
            )
        statement = insert(Setting).values(rows)
        statement = statement.on_conflict_do_update(
            index_elements=[Setting.key],
            set_={"value": statement.excluded.value},
        )
        try:
            await self.session.execute(statement)
        except SQLAlchemyError as e:
            logger.error("Settings upsert failed: %s", str(e), exc_info=True)
            raise DatabaseError(context={"keys": [row["key"] for row in rows]})

    async def upsert(self, key: str, value: Any, caller: Caller) -> Dict[str, str]:
        if not key:
            raise ValidationError("Setting key is required", field="key")
        if value is None:
            raise ValidationError("Value is required", field="value")

        text_value = stringify_setting(value)
        await self._upsert_rows([{"key": key, "value": text_value, "type": "string"}])
        await self.journal.record(caller, "update", self.entity_type, None, f"Updated setting: {key}")
        return {"key": key, "value": text_value}

    async def bulk_update(self, updates: Mapping[str, Any], caller: Caller) -> Dict[str, str]:
        """
        Upsert every entry of `updates` atomically.

        All entries are validated before anything is written.
        """
        if not isinstance(updates, Mapping) or not updates:
            raise ValidationError("Settings object required")

        rows = []
        for key, value in updates.items():
            if not key:
                raise ValidationError("Setting keys must not be empty", field="key")
            if value is None:
                raise ValidationError(f"Value is required for '{key}'", field=key)
            rows.append({"key": key, "value": stringify_setting(value), "type": "string"})

        await self._upsert_rows(rows)
        await self.journal.record(
            caller, "update", self.entity_type, None, f"Updated {len(rows)} settings"
        )
        logger.info("Updated %d settings", len(rows))
        return await self.get_all()

    async def active_bulletins(self) -> List[Bulletin]:
        """Active bulletins whose window contains now, highest priority first."""
        now = utcnow()
        query = (
            select(Bulletin)
            .where(
                Bulletin.is_active.is_(True),
                or_(Bulletin.starts_at.is_(None), Bulletin.starts_at <= now),
                or_(Bulletin.expires_at.is_(None), Bulletin.expires_at > now),
            )
            .order_by(Bulletin.priority.desc(), Bulletin.created_at.desc(), Bulletin.id.desc())
        )
        return list((await self.session.execute(query)).scalars().all())
