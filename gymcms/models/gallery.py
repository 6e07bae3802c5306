"""
Gallery & Media SQLAlchemy Models
===================================

What:  Photo albums, their images, and the uploaded media library.

Cascade:
    gallery_images.album_id → gallery_albums.id ON DELETE CASCADE.
    Deleting an album removes its images in the same statement; the
    application never iterates over children. album_id is nullable, so
    loose images that belong to no album are allowed.

Media files:
    `filename` is the generated <uuid><ext> name of the original upload.
    Derived renditions are found from it by convention:
        images/<base>.webp          transcoded copy
        thumbnails/<base>_thumb.webp  thumbnail
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from gymcms.database import Base
from gymcms.models.common import created_at_column, flag_column, sort_order_column


class GalleryAlbum(Base):
    __tablename__ = "gallery_albums"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    cover_image: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    is_active: Mapped[bool] = flag_column(True)
    sort_order: Mapped[int] = sort_order_column()
    created_at: Mapped[datetime] = created_at_column()

    # Filled in by the gallery service
    image_count = None
    images = None

    def __repr__(self) -> str:
        return f"<GalleryAlbum(id={self.id}, name='{self.name}')>"


class GalleryImage(Base):
    __tablename__ = "gallery_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    album_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("gallery_albums.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    file_path: Mapped[str] = mapped_column(String(500), nullable=False)
    thumbnail_path: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    caption: Mapped[str] = mapped_column(Text, nullable=False, default="")
    sort_order: Mapped[int] = sort_order_column()
    created_at: Mapped[datetime] = created_at_column()

    def __repr__(self) -> str:
        return f"<GalleryImage(id={self.id}, album_id={self.album_id})>"


class Media(Base):
    __tablename__ = "media"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    filename: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_path: Mapped[str] = mapped_column(String(500), nullable=False)
    file_type: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    file_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    width: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    height: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    alt_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = created_at_column()

    # Set on freshly uploaded rows only
    thumbnail = None

    def __repr__(self) -> str:
        return f"<Media(id={self.id}, filename='{self.filename}', type='{self.file_type}')>"
