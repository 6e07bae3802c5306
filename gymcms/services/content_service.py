"""
GymCMS Backend — Page & Blog Post Services
============================================

Slug-addressed content. Both services inherit partial updates, slug
uniqueness and journaling from Repository; what lives here is the
entity-specific defaulting and the blog's category listing.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select

from gymcms.exceptions import NotFoundError, ValidationError
from gymcms.models import BlogPost, Page
from gymcms.models.common import utcnow
from gymcms.models.content import POST_STATUSES
from gymcms.services.caller import Caller
from gymcms.services.repository import Repository

logger = logging.getLogger(__name__)


class PageService(Repository[Page]):
    model = Page
    entity_type = "page"
    label = "Page"
    noun = "page"
    slug_field = "slug"
    required_fields = ("title", "slug")
    required_message = "Title and slug are required"

    def _order_clauses(self) -> Sequence:
        return (Page.created_at.desc(),)

    def display_name(self, entity: Page) -> str:
        return entity.title

    async def _normalize(
        self, fields: Dict[str, Any], existing: Optional[Page], caller: Caller
    ) -> Dict[str, Any]:
        if existing is None and not fields.get("meta_title"):
            fields["meta_title"] = fields["title"]
        elif existing is not None and fields.get("meta_title") == "":
            # Blank meta title keeps the stored one
            fields.pop("meta_title")
        return fields

    async def get_by_slug_or_id(self, value: str, caller: Caller) -> Page:
        """Resolve `/pages/{slugOrId}`: slug first, then numeric id."""
        try:
            return await self.get_by_slug(value, caller)
        except NotFoundError:
            if not value.isdigit():
                raise
        return await self.get(int(value), caller)


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class PostService(Repository[BlogPost]):
    """
    Blog posts.

    Defaults on create:
        status        'draft'
        publish_date  now
        author_id     the creating administrator

    Status is a plain two-value field: a published post may be set back to
    draft at any time.
    """

    model = BlogPost
    entity_type = "blog_post"
    label = "Post"
    noun = "post"
    slug_field = "slug"
    required_fields = ("title", "slug")
    required_message = "Title and slug are required"
    filters = {
        "category": lambda value: BlogPost.category == value,
    }

    def _order_clauses(self) -> Sequence:
        return (BlogPost.publish_date.desc(), BlogPost.created_at.desc())

    def display_name(self, entity: BlogPost) -> str:
        return entity.title

    async def _normalize(
        self, fields: Dict[str, Any], existing: Optional[BlogPost], caller: Caller
    ) -> Dict[str, Any]:
        status = fields.get("status")
        if status == "" and existing is not None:
            fields.pop("status")
        elif status is not None and status not in POST_STATUSES:
            raise ValidationError("Status must be one of: draft, published", field="status")

        if fields.get("publish_date") is not None:
            fields["publish_date"] = _to_utc(fields["publish_date"])

        if existing is None:
            fields.setdefault("status", "draft")
            fields.setdefault("publish_date", utcnow())
            fields["author_id"] = caller.user_id
        return fields

    async def categories(self) -> List[str]:
        """Distinct, non-empty categories of published posts, sorted."""
        query = (
            select(BlogPost.category)
            .where(BlogPost.status == "published", BlogPost.category != "")
            .distinct()
            .order_by(BlogPost.category)
        )
        return [row[0] for row in (await self.session.execute(query)).all()]
