"""
GymCMS Backend — Visibility Policy
====================================

What:  Decides which records a caller may observe.
Why:   One rule set shared by every repository and by both deployment
       shapes, so list reads and single-item reads can never disagree.
How:   Each rule is registered twice over: as a SQL clause (used to filter
       list queries before counting and paginating) and as a row check
       (used on single-item reads). Authenticated callers bypass all rules.

Rules:
    Page                                   is_published
    BlogPost                               status == 'published' AND publish_date <= now
    Trainer, GymClass, MembershipPlan,
    GalleryAlbum                           is_active
    Testimonial                            is_approved

Models without a rule (GalleryImage, Media, inbox records) are unrestricted
at this layer. Gallery images read directly ignore their album's flag;
routes that expose admin-only records require authentication themselves.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Type

from sqlalchemy import Select, and_
from sqlalchemy.sql.elements import ColumnElement

from gymcms.models import (
    BlogPost,
    GalleryAlbum,
    GymClass,
    MembershipPlan,
    Page,
    Testimonial,
    Trainer,
)
from gymcms.models.common import as_utc, utcnow
from gymcms.services.caller import Caller


@dataclass(frozen=True)
class VisibilityRule:
    clause: Callable[[datetime], ColumnElement]
    check: Callable[[Any, datetime], bool]


class VisibilityPolicy:
    def __init__(self):
        self._rules: Dict[Type, VisibilityRule] = {}

    def register(
        self,
        model: Type,
        clause: Callable[[datetime], ColumnElement],
        check: Callable[[Any, datetime], bool],
    ) -> None:
        self._rules[model] = VisibilityRule(clause=clause, check=check)

    def rule_for(self, model: Type) -> Optional[VisibilityRule]:
        return self._rules.get(model)

    def is_visible(self, entity: Any, caller: Caller, now: Optional[datetime] = None) -> bool:
        if caller.is_authenticated:
            return True
        rule = self.rule_for(type(entity))
        if rule is None:
            return True
        return rule.check(entity, now or utcnow())

    def apply(
        self,
        query: Select,
        model: Type,
        caller: Caller,
        now: Optional[datetime] = None,
    ) -> Select:
        """Restrict a SELECT over `model` to the rows the caller may see."""
        if caller.is_authenticated:
            return query
        rule = self.rule_for(model)
        if rule is None:
            return query
        return query.where(rule.clause(now or utcnow()))


def _post_is_live(post: BlogPost, now: datetime) -> bool:
    publish_date = as_utc(post.publish_date)
    return post.status == "published" and publish_date is not None and publish_date <= now


def build_default_policy() -> VisibilityPolicy:
    policy = VisibilityPolicy()

    policy.register(
        Page,
        lambda now: Page.is_published.is_(True),
        lambda page, now: bool(page.is_published),
    )
    policy.register(
        BlogPost,
        lambda now: and_(BlogPost.status == "published", BlogPost.publish_date <= now),
        _post_is_live,
    )
    for model in (Trainer, GymClass, MembershipPlan, GalleryAlbum):
        policy.register(
            model,
            lambda now, model=model: model.is_active.is_(True),
            lambda entity, now: bool(entity.is_active),
        )
    policy.register(
        Testimonial,
        lambda now: Testimonial.is_approved.is_(True),
        lambda testimonial, now: bool(testimonial.is_approved),
    )
    return policy


visibility_policy = build_default_policy()
