"""
GymCMS Backend — Entity Repository Base
=========================================

What:  The list/get/create/update/delete pattern shared by every entity family.
Why:   Visibility, partial updates, slug uniqueness and journaling are the
       same rules everywhere; each entity service only declares what differs.
How:   Subclasses set class attributes (model, labels, ordering, required
       fields, slug column) and override the hooks:
           _normalize(fields, existing)  validate/convert incoming values
           _decorate(items)              attach joined read-only data
           display_name(entity)          name used in journal details

Partial-update semantics:
    update() receives only the fields the client actually sent. Anything
    omitted keeps its stored value. An explicit null is ignored unless the
    column is listed in `nullable_fields`, and an empty value for a required
    field is ignored rather than blanking the record.

Slug uniqueness:
    Checked before every insert and before every update that changes the
    slug ("any other row with this slug"). The UNIQUE index backs the check
    up: an IntegrityError from a concurrent writer also becomes a Conflict.
"""

import logging
from typing import Any, Callable, Dict, FrozenSet, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gymcms.exceptions import ConflictError, DatabaseError, NotFoundError, ValidationError
from gymcms.services.activity_service import ActivityJournal
from gymcms.services.caller import Caller
from gymcms.services.results import ListResult
from gymcms.services.visibility import VisibilityPolicy, visibility_policy

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")

VERBS = {"create": "Created", "update": "Updated", "delete": "Deleted"}


class Repository(Generic[ModelT]):
    model: Type[ModelT]
    entity_type: str = ""
    label: str = "Record"
    noun: str = "record"

    slug_field: Optional[str] = None
    required_fields: Tuple[str, ...] = ()
    required_message: str = "Required fields are missing"
    nullable_fields: FrozenSet[str] = frozenset()
    journaled: bool = True

    # name → function(value) returning a WHERE clause
    filters: Dict[str, Callable[[Any], Any]] = {}

    def __init__(
        self,
        session: AsyncSession,
        journal: Optional[ActivityJournal] = None,
        policy: VisibilityPolicy = visibility_policy,
    ):
        self.session = session
        self.journal = journal or ActivityJournal(session)
        self.policy = policy

    # ── Hooks ─────────────────────────────────────────────────────────────

    def display_name(self, entity: ModelT) -> str:
        return str(getattr(entity, "name", entity.id))

    def describe(self, action: str, entity: ModelT) -> str:
        return f"{VERBS[action]} {self.noun}: {self.display_name(entity)}"

    async def _normalize(
        self, fields: Dict[str, Any], existing: Optional[ModelT], caller: Caller
    ) -> Dict[str, Any]:
        return fields

    async def _decorate(self, items: List[ModelT]) -> List[ModelT]:
        return items

    # ── Queries ───────────────────────────────────────────────────────────

    def _order_clauses(self) -> Sequence:
        return (self.model.sort_order.asc(), self.model.created_at.desc())

    def _ordered(self, query: Select) -> Select:
        # id breaks ties between rows created within the same clock tick
        return query.order_by(*self._order_clauses(), self.model.id.desc())

    def _filtered(self, query: Select, filters: Optional[Dict[str, Any]]) -> Select:
        for name, value in (filters or {}).items():
            if value is None or value == "":
                continue
            if name not in self.filters:
                raise ValidationError(f"Unknown filter '{name}'", field=name)
            query = query.where(self.filters[name](value))
        return query

    async def _flush(self, action: str) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            logger.warning("Integrity error during %s %s: %s", action, self.entity_type, str(e.orig))
            if self.slug_field:
                raise ConflictError(context={"entity_type": self.entity_type})
            raise ValidationError(
                "The record references data that does not exist",
                context={"entity_type": self.entity_type},
            )
        except SQLAlchemyError as e:
            logger.error("Database error during %s %s: %s", action, self.entity_type, str(e), exc_info=True)
            raise DatabaseError(context={"entity_type": self.entity_type, "action": action})

    async def list(
        self,
        caller: Caller,
        filters: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> ListResult:
        """
        Visible records in default order, optionally paginated.

        Visibility and filters are applied before counting and paginating, so
        `total` is the size of what the caller could page through.
        """
        query = self._filtered(select(self.model), filters)
        query = self.policy.apply(query, self.model, caller)

        total = (
            await self.session.execute(select(func.count()).select_from(query.subquery()))
        ).scalar_one()

        query = self._ordered(query)
        if limit is not None:
            query = query.limit(limit)
        if offset:
            query = query.offset(offset)

        items = list((await self.session.execute(query)).scalars().all())
        items = await self._decorate(items)
        return ListResult(items=items, total=total, limit=limit, offset=offset)

    async def _load(self, entity_id: int) -> ModelT:
        entity = await self.session.get(self.model, entity_id)
        if entity is None:
            raise NotFoundError(self.label, entity_id)
        return entity

    async def get(self, entity_id: int, caller: Caller) -> ModelT:
        entity = await self._load(entity_id)
        if not self.policy.is_visible(entity, caller):
            # Hidden records look exactly like missing ones
            raise NotFoundError(self.label, entity_id)
        return (await self._decorate([entity]))[0]

    async def get_by_slug(self, slug: str, caller: Caller) -> ModelT:
        if not self.slug_field:
            raise NotFoundError(self.label, slug)
        column = getattr(self.model, self.slug_field)
        entity = (
            await self.session.execute(select(self.model).where(column == slug))
        ).scalar_one_or_none()
        if entity is None or not self.policy.is_visible(entity, caller):
            raise NotFoundError(self.label, slug)
        return (await self._decorate([entity]))[0]

    # ── Mutations ─────────────────────────────────────────────────────────

    async def _ensure_slug_free(self, slug: str, exclude_id: Optional[int] = None) -> None:
        column = getattr(self.model, self.slug_field)
        query = select(self.model.id).where(column == slug)
        if exclude_id is not None:
            query = query.where(self.model.id != exclude_id)
        if (await self.session.execute(query)).first() is not None:
            raise ConflictError(context={"slug": slug, "entity_type": self.entity_type})

    def _check_required(self, fields: Dict[str, Any]) -> None:
        missing = [name for name in self.required_fields if fields.get(name) in (None, "")]
        if missing:
            raise ValidationError(self.required_message, field=missing[0])

    async def _journal(self, caller: Caller, action: str, entity: ModelT) -> None:
        if self.journaled:
            await self.journal.record(
                caller, action, self.entity_type, entity.id, self.describe(action, entity)
            )

    async def create(self, fields: Dict[str, Any], caller: Caller) -> ModelT:
        fields = {k: v for k, v in fields.items() if v is not None or k in self.nullable_fields}
        self._check_required(fields)
        fields = await self._normalize(fields, None, caller)

        if self.slug_field:
            await self._ensure_slug_free(fields[self.slug_field])

        entity = self.model(**fields)
        self.session.add(entity)
        await self._flush("create")
        await self._journal(caller, "create", entity)
        logger.info("Created %s %s", self.entity_type, entity.id)
        return (await self._decorate([entity]))[0]

    def _clean_update(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        cleaned = {}
        for name, value in fields.items():
            if value is None and name not in self.nullable_fields:
                continue
            if name in self.required_fields and value in (None, ""):
                continue
            cleaned[name] = value
        return cleaned

    async def update(self, entity_id: int, fields: Dict[str, Any], caller: Caller) -> ModelT:
        entity = await self._load(entity_id)
        fields = await self._normalize(self._clean_update(fields), entity, caller)

        if self.slug_field and self.slug_field in fields:
            new_slug = fields[self.slug_field]
            if new_slug != getattr(entity, self.slug_field):
                await self._ensure_slug_free(new_slug, exclude_id=entity.id)

        for name, value in fields.items():
            setattr(entity, name, value)
        await self._flush("update")
        await self._journal(caller, "update", entity)
        return (await self._decorate([entity]))[0]

    async def delete(self, entity_id: int, caller: Caller) -> ModelT:
        entity = await self._load(entity_id)
        await self.session.delete(entity)
        await self._flush("delete")
        await self._journal(caller, "delete", entity)
        logger.info("Deleted %s %s", self.entity_type, entity_id)
        return entity
