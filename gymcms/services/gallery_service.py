"""
GymCMS Backend — Gallery Services
===================================

What:  Albums and the images inside them.

Cascade:
    AlbumService.delete() removes only the album row. The foreign key's
    ON DELETE CASCADE removes the images in the same statement.

Visibility:
    Albums follow is_active. An album read includes its images, so images
    of an inactive album are hidden from anonymous callers that way. Images
    read directly through ImageService are never filtered; a direct link
    to an image in an inactive album keeps working.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select

from gymcms.exceptions import ValidationError
from gymcms.models import GalleryAlbum, GalleryImage
from gymcms.services.caller import Caller
from gymcms.services.repository import Repository

logger = logging.getLogger(__name__)


class AlbumService(Repository[GalleryAlbum]):
    model = GalleryAlbum
    entity_type = "gallery_album"
    label = "Album"
    noun = "album"
    required_fields = ("name",)
    required_message = "Album name is required"

    async def _decorate(self, items: List[GalleryAlbum]) -> List[GalleryAlbum]:
        album_ids = [item.id for item in items]
        counts: Dict[int, int] = {}
        if album_ids:
            result = await self.session.execute(
                select(GalleryImage.album_id, func.count(GalleryImage.id))
                .where(GalleryImage.album_id.in_(album_ids))
                .group_by(GalleryImage.album_id)
            )
            counts = {album_id: count for album_id, count in result.all()}
        for item in items:
            item.image_count = counts.get(item.id, 0)
        return items

    async def images_of(self, album_id: int) -> List[GalleryImage]:
        result = await self.session.execute(
            select(GalleryImage)
            .where(GalleryImage.album_id == album_id)
            .order_by(
                GalleryImage.sort_order.asc(),
                GalleryImage.created_at.desc(),
                GalleryImage.id.desc(),
            )
        )
        return list(result.scalars().all())

    async def get_with_images(self, album_id: int, caller: Caller) -> GalleryAlbum:
        album = await self.get(album_id, caller)
        album.images = await self.images_of(album.id)
        return album


class ImageService(Repository[GalleryImage]):
    model = GalleryImage
    entity_type = "gallery_image"
    label = "Image"
    noun = "gallery image"
    required_fields = ("file_path",)
    required_message = "File path is required"
    nullable_fields = frozenset({"album_id"})
    filters = {
        "album_id": lambda value: GalleryImage.album_id == int(value),
    }

    def describe(self, action: str, entity: GalleryImage) -> str:
        verb = {"create": "Added", "update": "Updated", "delete": "Deleted"}[action]
        return f"{verb} gallery image"

    async def _normalize(
        self, fields: Dict[str, Any], existing: Optional[GalleryImage], caller: Caller
    ) -> Dict[str, Any]:
        album_id = fields.get("album_id")
        if album_id is not None and await self.session.get(GalleryAlbum, album_id) is None:
            raise ValidationError("Album does not exist", field="album_id")
        return fields
