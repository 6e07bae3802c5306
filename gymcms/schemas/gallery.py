"""Album, gallery image and media library contracts."""

from typing import List, Optional

from pydantic import BaseModel

from gymcms.schemas.common import UtcDateTime


class AlbumCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    cover_image: Optional[str] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class AlbumUpdate(AlbumCreate):
    pass


class ImageCreate(BaseModel):
    album_id: Optional[int] = None
    file_path: Optional[str] = None
    thumbnail_path: Optional[str] = None
    caption: Optional[str] = None
    sort_order: Optional[int] = None


class ImageUpdate(ImageCreate):
    pass


class ImageResponse(BaseModel):
    id: int
    album_id: Optional[int] = None
    file_path: str
    thumbnail_path: str
    caption: str
    sort_order: int
    created_at: Optional[UtcDateTime] = None

    model_config = {"from_attributes": True}


class AlbumResponse(BaseModel):
    id: int
    name: str
    description: str
    cover_image: str
    is_active: bool
    sort_order: int
    created_at: Optional[UtcDateTime] = None
    image_count: Optional[int] = None

    model_config = {"from_attributes": True}


class AlbumDetailResponse(AlbumResponse):
    images: List[ImageResponse] = []


class MediaUpdate(BaseModel):
    alt_text: Optional[str] = None


class MediaResponse(BaseModel):
    id: int
    filename: str
    original_name: str
    file_path: str
    file_type: str
    file_size: int
    width: Optional[int] = None
    height: Optional[int] = None
    alt_text: str
    created_at: Optional[UtcDateTime] = None
    thumbnail: Optional[str] = None

    model_config = {"from_attributes": True}
