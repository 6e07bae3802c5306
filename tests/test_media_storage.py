"""
GymCMS Backend — Media Storage Tests
======================================

What:  Tests for upload validation, storage, WebP transcoding and removal.
How:   A real temporary storage root and a real PNG generated with Pillow.

What we test:
    ✅ MIME allow-list and size limits (empty, oversized)
    ✅ Batch validation happens before anything is written
    ✅ Images get a WebP rendition and a 300px thumbnail
    ✅ Videos are stored as-is
    ✅ Undecodable images fall back to the original
    ✅ Deleting media removes every rendition; missing files are a no-op
    ✅ Public path resolution refuses traversal
"""

import pytest
from PIL import Image

from gymcms.config import settings
from gymcms.exceptions import NotFoundError, ValidationError
from gymcms.services.image_service import ImageProcessor
from gymcms.services.media_service import IncomingFile, MediaService


def _png(png_bytes, name="squat-rack.png"):
    return IncomingFile(filename=name, content_type="image/png", content=png_bytes)


class TestValidation:

    def test_disallowed_type(self, storage):
        with pytest.raises(ValidationError) as exc_info:
            storage.validate_type("application/pdf")
        assert exc_info.value.message == "Invalid file type. Allowed: JPG, PNG, GIF, WebP, MP4, WebM"

    def test_allowed_types(self, storage):
        for mime in ("image/jpeg", "image/png", "image/gif", "image/webp", "video/mp4", "video/webm"):
            assert storage.validate_type(mime) == mime

    def test_empty_file(self, storage):
        with pytest.raises(ValidationError):
            storage.validate_size(0)

    def test_oversized_file(self, storage):
        with pytest.raises(ValidationError) as exc_info:
            storage.validate_size(settings.max_file_size + 1)
        assert exc_info.value.message == "File size exceeds maximum of 50MB"

    def test_extension_falls_back_to_mime(self, storage):
        assert storage.extension_for("photo.JPEG", "image/jpeg") == ".jpeg"
        assert storage.extension_for("no-extension", "video/webm") == ".webm"


class TestUpload:

    @pytest.mark.asyncio
    async def test_png_is_transcoded(self, session, storage, admin_caller, png_bytes, journal_count):
        service = MediaService(session, storage)

        [media] = await service.upload([_png(png_bytes)], admin_caller)

        assert media.original_name == "squat-rack.png"
        assert media.file_type == "image/png"
        assert (media.width, media.height) == (640, 480)
        assert media.file_path.startswith("/uploads/images/")
        assert media.file_path.endswith(".webp")
        assert media.thumbnail.startswith("/uploads/thumbnails/")
        assert storage.original_path(media.filename).is_file()
        with Image.open(storage.thumbnail_path(media.filename)) as thumb:
            assert thumb.width == settings.thumbnail_width
        assert await journal_count(action="upload", entity_type="media") == 1

    @pytest.mark.asyncio
    async def test_video_is_stored_as_is(self, session, storage, admin_caller):
        video = IncomingFile(filename="tour.mp4", content_type="video/mp4", content=b"\x00\x00\x00\x18ftypmp42")

        [media] = await MediaService(session, storage).upload([video], admin_caller)

        assert media.file_path == f"/uploads/{media.filename}"
        assert media.width is None
        assert media.thumbnail is None

    @pytest.mark.asyncio
    async def test_bad_file_in_batch_writes_nothing(self, session, storage, admin_caller, png_bytes):
        bad = IncomingFile(filename="notes.txt", content_type="text/plain", content=b"hello")

        with pytest.raises(ValidationError):
            await MediaService(session, storage).upload([_png(png_bytes), bad], admin_caller)

        assert [p for p in storage.storage_root.iterdir() if p.is_file()] == []

    @pytest.mark.asyncio
    async def test_empty_batch(self, session, storage, admin_caller):
        with pytest.raises(ValidationError) as exc_info:
            await MediaService(session, storage).upload([], admin_caller)
        assert exc_info.value.message == "No files uploaded"

    @pytest.mark.asyncio
    async def test_too_many_files(self, session, storage, admin_caller, png_bytes):
        files = [_png(png_bytes, f"{n}.png") for n in range(settings.max_files_per_upload + 1)]
        with pytest.raises(ValidationError) as exc_info:
            await MediaService(session, storage).upload(files, admin_caller)
        assert exc_info.value.message == "Maximum 10 files per upload"

    @pytest.mark.asyncio
    async def test_decompression_bomb_is_rejected_and_cleaned_up(
        self, session, storage, admin_caller, png_bytes, monkeypatch
    ):
        # 640x480 is far beyond twice this limit, so Pillow raises
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)

        with pytest.raises(ValidationError) as exc_info:
            await MediaService(session, storage).upload([_png(png_bytes)], admin_caller)

        assert exc_info.value.message == "Image is too large"
        assert [p for p in storage.storage_root.rglob("*") if p.is_file()] == []

    @pytest.mark.asyncio
    async def test_unexpected_failure_removes_stored_files(
        self, session, storage, admin_caller, png_bytes, monkeypatch
    ):
        service = MediaService(session, storage)

        async def broken(filename):
            raise RuntimeError("disk went away")

        monkeypatch.setattr(service.processor, "process", broken)

        with pytest.raises(RuntimeError):
            await service.upload([_png(png_bytes)], admin_caller)

        assert [p for p in storage.storage_root.rglob("*") if p.is_file()] == []

    @pytest.mark.asyncio
    async def test_undecodable_image_keeps_original(self, storage):
        filename, _ = await storage.store(b"definitely not a png", ".png")

        result = await ImageProcessor(storage).process(filename)

        assert result.webp is None
        assert result.file_path == f"/uploads/{filename}"


class TestDeleteAndServe:

    @pytest.mark.asyncio
    async def test_delete_removes_all_renditions(self, session, storage, admin_caller, png_bytes):
        service = MediaService(session, storage)
        [media] = await service.upload([_png(png_bytes)], admin_caller)
        paths = storage.derived_paths(media.filename)
        assert all(p.is_file() for p in paths)

        await service.delete(media.id, admin_caller)

        assert not any(p.exists() for p in paths)
        with pytest.raises(NotFoundError):
            await service.get(media.id, admin_caller)

    def test_removing_unknown_files_is_a_no_op(self, storage):
        assert storage.remove_media_files("00000000-0000-0000-0000-000000000000.png") == 0

    @pytest.mark.asyncio
    async def test_alt_text_is_the_only_editable_field(self, session, storage, admin_caller, png_bytes):
        service = MediaService(session, storage)
        [media] = await service.upload([_png(png_bytes)], admin_caller)

        updated = await service.update(
            media.id, {"alt_text": "Squat rack", "file_path": "/etc/passwd"}, admin_caller
        )

        assert updated.alt_text == "Squat rack"
        assert updated.file_path.startswith("/uploads/images/")

    @pytest.mark.asyncio
    async def test_resolve_public(self, storage):
        filename, absolute = await storage.store(b"bytes", ".gif")

        assert storage.resolve_public(filename) == absolute.resolve()
        with pytest.raises(NotFoundError):
            storage.resolve_public("../../etc/passwd")
        with pytest.raises(NotFoundError):
            storage.resolve_public("missing.gif")
