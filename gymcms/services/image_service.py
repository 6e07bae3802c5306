"""
GymCMS Backend — Image Rendition Service
==========================================

What:  Produces a WebP copy and a thumbnail for each uploaded image.
Why:   The public site serves WebP; the admin media grid uses thumbnails.
How:   Pillow does the work in a worker thread (asyncio.to_thread) so the
       event loop keeps serving requests. The whole job is bounded by
       settings.image_processing_timeout.

Failure handling:
    Unreadable or corrupt image  → logged, original file used as-is
    Timeout                      → UpstreamTimeoutError (surfaced to caller)
    Pixel count over Pillow limit → ValidationError("Image is too large")
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from gymcms.config import settings
from gymcms.exceptions import UpstreamTimeoutError, ValidationError
from gymcms.services.storage_service import IMAGE_EXTENSIONS, StorageService

logger = logging.getLogger(__name__)


@dataclass
class ProcessedImage:
    original: str
    webp: Optional[str] = None
    thumbnail: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def file_path(self) -> str:
        return self.webp or self.original


def _prepare_mode(image: Image.Image) -> Image.Image:
    # WebP keeps alpha; palette and exotic modes are converted first
    if image.mode == "P":
        return image.convert("RGBA")
    if image.mode not in ("RGB", "RGBA"):
        return image.convert("RGB")
    return image


def render_webp(
    source: Path,
    webp_path: Path,
    thumbnail_path: Path,
    thumbnail_width: int,
    quality: int,
    thumbnail_quality: int,
) -> tuple:
    """Blocking Pillow work. Returns the source (width, height)."""
    with Image.open(source) as image:
        width, height = image.size
        converted = _prepare_mode(image)
        converted.save(webp_path, "WEBP", quality=quality)

        thumb = converted.copy()
        if thumb.width > thumbnail_width:
            ratio = thumbnail_width / float(thumb.width)
            thumb = thumb.resize(
                (thumbnail_width, max(1, int(thumb.height * ratio))),
                Image.Resampling.LANCZOS,
            )
        thumb.save(thumbnail_path, "WEBP", quality=thumbnail_quality)
    return width, height


class ImageProcessor:
    def __init__(self, storage: StorageService, timeout: Optional[float] = None):
        self.storage = storage
        self.timeout = timeout or settings.image_processing_timeout

    async def process(self, filename: str) -> ProcessedImage:
        source = self.storage.original_path(filename)
        result = ProcessedImage(original=self.storage.public_url(source))

        if source.suffix.lower() not in IMAGE_EXTENSIONS:
            return result

        webp_path = self.storage.webp_path(filename)
        thumbnail_path = self.storage.thumbnail_path(filename)
        try:
            width, height = await asyncio.wait_for(
                asyncio.to_thread(
                    render_webp,
                    source,
                    webp_path,
                    thumbnail_path,
                    settings.thumbnail_width,
                    settings.webp_quality,
                    settings.thumbnail_quality,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.error("Image processing timed out after %.1fs: %s", self.timeout, filename)
            raise UpstreamTimeoutError("image_processing", self.timeout, context={"filename": filename})
        except Image.DecompressionBombError as e:
            logger.warning("Rejected oversized image %s: %s", filename, str(e))
            raise ValidationError("Image is too large", field="files", context={"filename": filename})
        except (UnidentifiedImageError, OSError, ValueError) as e:
            logger.error("Image processing error for %s: %s", filename, str(e))
            return result

        result.webp = self.storage.public_url(webp_path)
        result.thumbnail = self.storage.public_url(thumbnail_path)
        result.width = width
        result.height = height
        return result
