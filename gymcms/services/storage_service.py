"""
GymCMS Backend — Upload Storage Service
=========================================

What:  Validates, stores, locates and removes uploaded media files.
Why:   Centralizes all file system operations with their security checks.
How:   Files are written asynchronously (aiofiles) under the storage root
       with a generated UUID name; derived renditions live in fixed
       sub-directories next to it.

Directory Structure:
    uploads/
    ├── 3f2a...-9c1d.jpg                 original upload
    ├── images/
    │   └── 3f2a...-9c1d.webp            transcoded rendition
    └── thumbnails/
        └── 3f2a...-9c1d_thumb.webp      300px thumbnail

Security Model:
    1. MIME allow-list:  only the image and video types the site can show
    2. Size check:       enforced per file against settings.max_file_size
    3. UUID filename:    no user input ever reaches the file system path
    4. Path resolution:  public paths are resolved and must stay under root
"""

import logging
import os
import uuid
from pathlib import Path
from typing import List, Optional, Tuple

import aiofiles

from gymcms.config import settings
from gymcms.exceptions import FileStorageError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# ── Allowed File Types ────────────────────────────────────────────────────
# MIME type → extension used when the upload's own name has none
ALLOWED_MIME_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "video/mp4": ".mp4",
    "video/webm": ".webm",
}

# Extensions Pillow renditions are attempted for
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}

IMAGES_DIR = "images"
THUMBNAILS_DIR = "thumbnails"
PUBLIC_PREFIX = "/uploads"


class StorageService:
    """
    Owns the upload directory tree.

    One instance per storage root; tests pass a temporary directory.
    """

    def __init__(self, storage_root: Optional[str] = None):
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        for directory in (self.storage_root, self.images_dir, self.thumbnails_dir):
            directory.mkdir(parents=True, exist_ok=True)

    @property
    def images_dir(self) -> Path:
        return self.storage_root / IMAGES_DIR

    @property
    def thumbnails_dir(self) -> Path:
        return self.storage_root / THUMBNAILS_DIR

    # ── Validation ────────────────────────────────────────────────────────

    def validate_type(self, content_type: Optional[str]) -> str:
        if content_type not in ALLOWED_MIME_TYPES:
            raise ValidationError(
                message="Invalid file type. Allowed: JPG, PNG, GIF, WebP, MP4, WebM",
                field="files",
                context={"content_type": content_type},
            )
        return content_type

    def validate_size(self, size: int) -> None:
        if size <= 0:
            raise ValidationError(message="Uploaded file is empty", field="files")
        if size > settings.max_file_size:
            max_mb = settings.max_file_size / (1024 * 1024)
            raise ValidationError(
                message=f"File size exceeds maximum of {max_mb:.0f}MB",
                field="files",
                context={"max_size": settings.max_file_size, "actual_size": size},
            )

    def extension_for(self, original_name: str, content_type: str) -> str:
        ext = Path(original_name or "").suffix.lower()
        if not ext or len(ext) > 6:
            ext = ALLOWED_MIME_TYPES[content_type]
        return ext

    # ── Paths ─────────────────────────────────────────────────────────────

    @staticmethod
    def base_name(filename: str) -> str:
        return Path(filename).stem

    def original_path(self, filename: str) -> Path:
        return self.storage_root / filename

    def webp_path(self, filename: str) -> Path:
        return self.images_dir / f"{self.base_name(filename)}.webp"

    def thumbnail_path(self, filename: str) -> Path:
        return self.thumbnails_dir / f"{self.base_name(filename)}_thumb.webp"

    def derived_paths(self, filename: str) -> List[Path]:
        """Original, transcoded and thumbnail locations for a stored filename."""
        return [
            self.original_path(filename),
            self.webp_path(filename),
            self.thumbnail_path(filename),
        ]

    def public_url(self, path: Path) -> str:
        relative = path.resolve().relative_to(self.storage_root).as_posix()
        return f"{PUBLIC_PREFIX}/{relative}"

    def resolve_public(self, relative_path: str) -> Path:
        """
        Map a path below /uploads to a file on disk.

        Raises:
            NotFoundError for missing files and for anything resolving
            outside the storage root (path traversal).
        """
        candidate = (self.storage_root / relative_path).resolve()
        try:
            candidate.relative_to(self.storage_root)
        except ValueError:
            logger.warning("Blocked path traversal attempt: %s", relative_path)
            raise NotFoundError("File", relative_path)
        if not candidate.is_file():
            raise NotFoundError("File", relative_path)
        return candidate

    # ── Write / Delete ────────────────────────────────────────────────────

    async def store(self, content: bytes, extension: str) -> Tuple[str, Path]:
        """
        Write an upload under a fresh UUID name.

        Returns:
            (filename, absolute_path)
        """
        filename = f"{uuid.uuid4()}{extension}"
        absolute_path = self.original_path(filename)
        try:
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded file. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )
        logger.info("File stored: %s (%d bytes)", filename, len(content))
        return filename, absolute_path

    def remove_media_files(self, filename: str) -> int:
        """
        Delete the original and its renditions. Missing files are skipped.

        Returns:
            Number of files actually removed.
        """
        removed = 0
        for path in self.derived_paths(filename):
            try:
                os.remove(path)
                removed += 1
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.error("Failed to delete %s: %s", path, str(e))
                raise FileStorageError(
                    message="Failed to delete media file",
                    context={"path": str(path), "os_error": str(e)},
                )
        logger.info("Removed %d file(s) for %s", removed, filename)
        return removed
