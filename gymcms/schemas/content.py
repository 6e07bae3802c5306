"""Page and blog post contracts."""

from typing import Optional

from pydantic import BaseModel

from gymcms.schemas.common import ListEnvelope, UtcDateTime


# ══════════════════════════════════════════════════════════════════════════
# Pages
# ══════════════════════════════════════════════════════════════════════════


class PageCreate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    content: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None
    is_published: Optional[bool] = None


class PageUpdate(PageCreate):
    pass


class PageResponse(BaseModel):
    id: int
    title: str
    slug: str
    content: str
    meta_title: str
    meta_description: str
    meta_keywords: str
    is_published: bool
    created_at: Optional[UtcDateTime] = None
    updated_at: Optional[UtcDateTime] = None

    model_config = {"from_attributes": True}


# ══════════════════════════════════════════════════════════════════════════
# Blog posts
# ══════════════════════════════════════════════════════════════════════════


class PostCreate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    excerpt: Optional[str] = None
    content: Optional[str] = None
    featured_image: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[str] = None
    status: Optional[str] = None
    publish_date: Optional[UtcDateTime] = None


class PostUpdate(PostCreate):
    pass


class PostResponse(BaseModel):
    id: int
    title: str
    slug: str
    excerpt: str
    content: str
    featured_image: str
    category: str
    tags: str
    status: str
    publish_date: Optional[UtcDateTime] = None
    author_id: Optional[int] = None
    created_at: Optional[UtcDateTime] = None
    updated_at: Optional[UtcDateTime] = None

    model_config = {"from_attributes": True}


class PostListResponse(ListEnvelope[PostResponse]):
    pass
