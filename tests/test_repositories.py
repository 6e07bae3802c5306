"""
GymCMS Backend — Entity Repository Tests
==========================================

What:  Tests for the shared create/update/delete behaviour and the
       entity-specific rules layered on top of it.
How:   Real repositories on the seeded in-memory store.

What we test:
    ✅ Partial updates change only the fields sent
    ✅ Slug conflicts on create and update; own slug is fine
    ✅ Required-field messages
    ✅ Album deletion cascades to its images only
    ✅ Exactly one journal row per successful mutation, none on failure
    ✅ Post defaults (draft, publish_date, author) and page meta_title default
    ✅ Class trainer details, inquiry plan checks, contact inbox
"""

import pytest
from sqlalchemy import func, select

from gymcms.exceptions import ConflictError, NotFoundError, ValidationError
from gymcms.models import ActivityLog, GalleryImage
from gymcms.services.content_service import PageService, PostService
from gymcms.services.fitness_service import ClassService, TrainerService
from gymcms.services.gallery_service import AlbumService, ImageService
from gymcms.services.inbox_service import ContactService, InquiryService


class TestPartialUpdate:

    @pytest.mark.asyncio
    async def test_empty_update_changes_nothing(self, session, admin_caller):
        service = TrainerService(session)
        trainer = await service.create(
            {"name": "Bishal", "specialty": "Strength", "bio": "Ten years coaching"}, admin_caller
        )

        updated = await service.update(trainer.id, {}, admin_caller)

        assert (updated.name, updated.specialty, updated.bio) == ("Bishal", "Strength", "Ten years coaching")

    @pytest.mark.asyncio
    async def test_single_field_update_preserves_the_rest(self, session, admin_caller):
        service = TrainerService(session)
        trainer = await service.create(
            {"name": "Bishal", "specialty": "Strength", "is_active": True, "sort_order": 4},
            admin_caller,
        )

        updated = await service.update(trainer.id, {"specialty": "Mobility"}, admin_caller)

        assert updated.specialty == "Mobility"
        assert updated.name == "Bishal"
        assert updated.is_active is True
        assert updated.sort_order == 4

    @pytest.mark.asyncio
    async def test_explicit_null_and_blank_required_are_ignored(self, session, admin_caller):
        service = TrainerService(session)
        trainer = await service.create({"name": "Bishal", "bio": "Coach"}, admin_caller)

        updated = await service.update(trainer.id, {"name": "", "bio": None}, admin_caller)

        assert updated.name == "Bishal"
        assert updated.bio == "Coach"

    @pytest.mark.asyncio
    async def test_false_flag_is_applied(self, session, admin_caller):
        service = TrainerService(session)
        trainer = await service.create({"name": "Bishal"}, admin_caller)

        updated = await service.update(trainer.id, {"is_active": False}, admin_caller)

        assert updated.is_active is False

    @pytest.mark.asyncio
    async def test_update_missing_record(self, session, admin_caller):
        with pytest.raises(NotFoundError):
            await TrainerService(session).update(9999, {"name": "x"}, admin_caller)


class TestSlugUniqueness:

    @pytest.mark.asyncio
    async def test_duplicate_slug_on_create(self, session, admin_caller):
        service = PageService(session)
        await service.create({"title": "About", "slug": "about"}, admin_caller)

        with pytest.raises(ConflictError) as exc_info:
            await service.create({"title": "About again", "slug": "about"}, admin_caller)

        assert exc_info.value.message == "Slug already exists"
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_update_to_another_records_slug(self, session, admin_caller):
        service = PostService(session)
        await service.create({"title": "First", "slug": "first"}, admin_caller)
        second = await service.create({"title": "Second", "slug": "second"}, admin_caller)

        with pytest.raises(ConflictError):
            await service.update(second.id, {"slug": "first"}, admin_caller)

    @pytest.mark.asyncio
    async def test_update_to_own_slug_succeeds(self, session, admin_caller):
        service = PostService(session)
        post = await service.create({"title": "First", "slug": "first"}, admin_caller)

        updated = await service.update(post.id, {"slug": "first", "title": "Renamed"}, admin_caller)

        assert updated.slug == "first"
        assert updated.title == "Renamed"

    @pytest.mark.asyncio
    async def test_slugs_are_per_entity(self, session, admin_caller):
        await PageService(session).create({"title": "News", "slug": "news"}, admin_caller)
        post = await PostService(session).create({"title": "News", "slug": "news"}, admin_caller)
        assert post.slug == "news"


class TestRequiredFields:

    @pytest.mark.asyncio
    async def test_page_requires_title_and_slug(self, session, admin_caller):
        with pytest.raises(ValidationError) as exc_info:
            await PageService(session).create({"title": "No slug"}, admin_caller)
        assert exc_info.value.message == "Title and slug are required"

    @pytest.mark.asyncio
    async def test_trainer_requires_name(self, session, admin_caller):
        with pytest.raises(ValidationError) as exc_info:
            await TrainerService(session).create({"name": ""}, admin_caller)
        assert exc_info.value.message == "Name is required"


class TestAlbumCascade:

    @pytest.mark.asyncio
    async def test_deleting_album_removes_only_its_images(self, session, admin_caller):
        albums = AlbumService(session)
        images = ImageService(session)
        doomed = await albums.create({"name": "Opening Day"}, admin_caller)
        kept = await albums.create({"name": "Competition"}, admin_caller)
        for n in range(3):
            await images.create({"album_id": doomed.id, "file_path": f"/uploads/d{n}.webp"}, admin_caller)
        await images.create({"album_id": kept.id, "file_path": "/uploads/k.webp"}, admin_caller)
        await images.create({"file_path": "/uploads/loose.webp"}, admin_caller)

        await albums.delete(doomed.id, admin_caller)

        async def count(album_id):
            query = select(func.count()).select_from(GalleryImage)
            if album_id is None:
                query = query.where(GalleryImage.album_id.is_(None))
            else:
                query = query.where(GalleryImage.album_id == album_id)
            return (await session.execute(query)).scalar_one()

        assert await count(doomed.id) == 0
        assert await count(kept.id) == 1
        assert await count(None) == 1

    @pytest.mark.asyncio
    async def test_album_listing_counts_images(self, session, admin_caller):
        album = await AlbumService(session).create({"name": "Gym Floor"}, admin_caller)
        for n in range(2):
            await ImageService(session).create(
                {"album_id": album.id, "file_path": f"/uploads/{n}.webp", "sort_order": 2 - n},
                admin_caller,
            )

        listed = await AlbumService(session).list(admin_caller)
        detail = await AlbumService(session).get_with_images(album.id, admin_caller)

        assert listed.items[0].image_count == 2
        assert [img.file_path for img in detail.images] == ["/uploads/1.webp", "/uploads/0.webp"]

    @pytest.mark.asyncio
    async def test_image_for_unknown_album(self, session, admin_caller):
        with pytest.raises(ValidationError):
            await ImageService(session).create({"album_id": 4242, "file_path": "/x.webp"}, admin_caller)


class TestJournaling:

    @pytest.mark.asyncio
    async def test_one_row_per_mutation(self, session, admin_caller, journal_count):
        service = TrainerService(session)

        trainer = await service.create({"name": "Journaled"}, admin_caller)
        assert await journal_count(action="create", entity_type="trainer") == 1

        await service.update(trainer.id, {"bio": "Updated"}, admin_caller)
        assert await journal_count(action="update", entity_type="trainer") == 1

        await service.delete(trainer.id, admin_caller)
        assert await journal_count(action="delete", entity_type="trainer") == 1
        assert await journal_count(entity_type="trainer") == 3

    @pytest.mark.asyncio
    async def test_failed_mutation_is_not_journaled(self, session, admin_caller, journal_count):
        service = PageService(session)
        await service.create({"title": "About", "slug": "about"}, admin_caller)
        before = await journal_count()

        with pytest.raises(ConflictError):
            await service.create({"title": "Dup", "slug": "about"}, admin_caller)

        assert await journal_count() == before


class TestContentDefaults:

    @pytest.mark.asyncio
    async def test_post_without_status_is_a_draft(self, session, admin_caller, anonymous):
        service = PostService(session)

        post = await service.create({"title": "Leg Day", "slug": "leg-day"}, admin_caller)

        assert post.status == "draft"
        assert post.publish_date is not None
        assert post.author_id == admin_caller.user_id
        assert [p.slug for p in (await service.list(anonymous)).items] == []
        assert [p.slug for p in (await service.list(admin_caller)).items] == ["leg-day"]

    @pytest.mark.asyncio
    async def test_post_status_is_validated(self, session, admin_caller):
        with pytest.raises(ValidationError):
            await PostService(session).create(
                {"title": "X", "slug": "x", "status": "archived"}, admin_caller
            )

    @pytest.mark.asyncio
    async def test_published_post_can_return_to_draft(self, session, admin_caller):
        service = PostService(session)
        post = await service.create({"title": "X", "slug": "x", "status": "published"}, admin_caller)

        updated = await service.update(post.id, {"status": "draft"}, admin_caller)

        assert updated.status == "draft"

    @pytest.mark.asyncio
    async def test_categories_of_published_posts(self, session, admin_caller):
        service = PostService(session)
        await service.create({"title": "A", "slug": "a", "status": "published", "category": "Nutrition"}, admin_caller)
        await service.create({"title": "B", "slug": "b", "status": "published", "category": "Cardio"}, admin_caller)
        await service.create({"title": "C", "slug": "c", "category": "Secret"}, admin_caller)

        assert await service.categories() == ["Cardio", "Nutrition"]

    @pytest.mark.asyncio
    async def test_page_meta_title_defaults_to_title(self, session, admin_caller):
        page = await PageService(session).create({"title": "Contact Us", "slug": "contact"}, admin_caller)
        assert page.meta_title == "Contact Us"

    @pytest.mark.asyncio
    async def test_page_by_slug_or_id(self, session, admin_caller):
        service = PageService(session)
        page = await service.create({"title": "Rules", "slug": "rules"}, admin_caller)

        assert (await service.get_by_slug_or_id("rules", admin_caller)).id == page.id
        assert (await service.get_by_slug_or_id(str(page.id), admin_caller)).slug == "rules"


class TestClassesAndInbox:

    @pytest.mark.asyncio
    async def test_class_carries_trainer_details(self, session, admin_caller):
        trainer = await TrainerService(session).create(
            {"name": "Anita", "photo": "/uploads/anita.webp", "specialty": "Yoga"}, admin_caller
        )
        gym_class = await ClassService(session).create(
            {"name": "Morning Flow", "trainer_id": trainer.id}, admin_caller
        )

        assert gym_class.trainer_name == "Anita"
        assert gym_class.trainer_specialty == "Yoga"
        assert gym_class.duration == 60
        assert gym_class.capacity == 20
        assert gym_class.difficulty == "intermediate"

    @pytest.mark.asyncio
    async def test_class_with_dangling_trainer(self, session, admin_caller):
        gym_class = await ClassService(session).create({"name": "Orphan", "trainer_id": 777}, admin_caller)
        assert gym_class.trainer_name is None

    @pytest.mark.asyncio
    async def test_inquiry_rejects_unknown_plan(self, session, anonymous):
        with pytest.raises(ValidationError) as exc_info:
            await InquiryService(session).create(
                {"name": "Sam", "email": "sam@example.com", "plan_id": 999}, anonymous
            )
        assert exc_info.value.field == "plan_id"

    @pytest.mark.asyncio
    async def test_anonymous_inquiry_is_journaled_without_user(self, session, anonymous, admin_caller):
        service = InquiryService(session)

        inquiry = await service.create({"name": "Sam", "email": "sam@example.com"}, anonymous)
        listed = await service.list(admin_caller)
        entry = (
            await session.execute(
                select(ActivityLog).where(ActivityLog.entity_type == "membership_inquiry")
            )
        ).scalar_one()

        assert inquiry.status == "new"
        assert listed.items[0].plan_name is None
        assert entry.user_id is None
        assert entry.details == "New membership inquiry from: Sam"

    @pytest.mark.asyncio
    async def test_contact_email_is_checked(self, session, anonymous):
        with pytest.raises(ValidationError) as exc_info:
            await ContactService(session).create(
                {"name": "A", "email": "not-an-email", "message": "hi"}, anonymous
            )
        assert exc_info.value.message == "Invalid email address"

    @pytest.mark.asyncio
    async def test_unread_filter_and_mark_read(self, session, anonymous, admin_caller):
        service = ContactService(session)
        first = await service.create({"name": "A", "email": "a@example.com", "message": "one"}, anonymous)
        await service.create({"name": "B", "email": "b@example.com", "message": "two"}, anonymous)

        await service.mark_read(first.id, admin_caller)
        unread = await service.list_submissions(admin_caller, unread_only=True)

        assert [s.name for s in unread.items] == ["B"]
        assert unread.total == 1
        assert await service.unread_count() == 1
