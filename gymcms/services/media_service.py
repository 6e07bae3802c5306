"""
GymCMS Backend — Media Library Service
========================================

What:  Upload → validate → store → transcode → persist workflow for the
       media library, plus listing, alt-text edits and deletion.
How:   Composes StorageService (disk) and ImageProcessor (Pillow) with the
       shared Repository behaviour for the `media` table.

Upload Flow:
    ┌──────────┐    ┌────────────┐    ┌─────────────┐    ┌──────────┐
    │ Validate │───▶│   Store    │───▶│  Transcode  │───▶│  Insert  │
    │ (batch)  │    │ (aiofiles) │    │  (Pillow)   │    │  (rows)  │
    └──────────┘    └────────────┘    └─────────────┘    └──────────┘

    Every file in the batch is validated before anything touches the disk.
    If a later step fails, the files already written for this batch are
    removed and the error propagates.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from gymcms.config import settings
from gymcms.exceptions import ValidationError
from gymcms.models import Media
from gymcms.services.activity_service import ActivityJournal
from gymcms.services.caller import Caller
from gymcms.services.image_service import ImageProcessor
from gymcms.services.repository import Repository
from gymcms.services.storage_service import StorageService

logger = logging.getLogger(__name__)


@dataclass
class IncomingFile:
    """A file received from the HTTP layer, already read into memory."""

    filename: str
    content_type: Optional[str]
    content: bytes


class MediaService(Repository[Media]):
    model = Media
    entity_type = "media"
    label = "Media"
    noun = "media"
    filters = {
        "type": lambda value: Media.file_type.like(f"{value}%"),
    }

    def __init__(
        self,
        session: AsyncSession,
        storage: StorageService,
        journal: Optional[ActivityJournal] = None,
        processor: Optional[ImageProcessor] = None,
    ):
        super().__init__(session, journal)
        self.storage = storage
        self.processor = processor or ImageProcessor(storage)

    def display_name(self, entity: Media) -> str:
        return entity.original_name

    def _order_clauses(self) -> Sequence:
        return (Media.created_at.desc(),)

    def _validate_batch(self, files: List[IncomingFile]) -> None:
        if not files:
            raise ValidationError("No files uploaded", field="files")
        if len(files) > settings.max_files_per_upload:
            raise ValidationError(
                f"Maximum {settings.max_files_per_upload} files per upload",
                field="files",
            )
        for incoming in files:
            self.storage.validate_type(incoming.content_type)
            self.storage.validate_size(len(incoming.content))

    async def upload(self, files: List[IncomingFile], caller: Caller) -> List[Media]:
        self._validate_batch(files)

        stored: List[str] = []
        created: List[Media] = []
        try:
            for incoming in files:
                extension = self.storage.extension_for(incoming.filename, incoming.content_type)
                filename, _ = await self.storage.store(incoming.content, extension)
                stored.append(filename)

                rendition = await self.processor.process(filename)
                media = Media(
                    filename=filename,
                    original_name=incoming.filename or filename,
                    file_path=rendition.file_path,
                    file_type=incoming.content_type,
                    file_size=len(incoming.content),
                    width=rendition.width,
                    height=rendition.height,
                    alt_text="",
                )
                self.session.add(media)
                await self._flush("create")
                media.thumbnail = rendition.thumbnail
                created.append(media)
        except Exception:
            # No failure may leave orphan renditions behind
            for filename in stored:
                self.storage.remove_media_files(filename)
            raise

        await self.journal.record(
            caller, "upload", self.entity_type, None, f"Uploaded {len(created)} file(s)"
        )
        logger.info("Uploaded %d media file(s)", len(created))
        return created

    async def _normalize(
        self, fields: Dict[str, Any], existing: Optional[Media], caller: Caller
    ) -> Dict[str, Any]:
        # Only the alt text of an uploaded file is editable
        return {"alt_text": fields["alt_text"]} if "alt_text" in fields else {}

    async def delete(self, entity_id: int, caller: Caller) -> Media:
        media = await super().delete(entity_id, caller)
        self.storage.remove_media_files(media.filename)
        return media
