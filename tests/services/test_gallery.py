"""Tests for the gallery and detection import services."""
import pytest

from facegallery.core.exceptions import (
    ImageNotFoundError,
    PersonNotFoundError,
    ValidationError,
)
from facegallery.domain.entities.face import FaceGeometry
from facegallery.services.detection_import import DetectedFace, DetectionImportService


class TestGalleryViews:

    async def test_list_persons_counts_faces_and_images(self, gallery, seeder):
        """Should report derived counts for each person, ordered by name."""
        group = await seeder.image("group.jpg")
        await seeder.person("Bob", faces=2, image_id=group)
        alice = await seeder.person("Alice", faces=1)
        await seeder.person("Alice", faces=1, image_id=group)

        persons = await gallery.list_persons()

        assert [p.person_name for p in persons] == ["Alice", "Alice", "Bob"]
        bob = persons[2]
        assert bob.total_faces == 2
        assert bob.total_images == 1
        assert bob.thumbnail == "bob_0.jpg"
        assert alice.person_id in {p.person_id for p in persons}

    async def test_get_person_lists_faces_and_images(self, gallery, seeder):
        alice = await seeder.person("Alice", faces=2)

        detail = await gallery.get_person(alice.person_id)

        assert detail.person_name == "Alice"
        assert detail.total_faces == 2
        assert detail.total_images == 1
        assert {face.face_id for face in detail.faces} == set(alice.face_ids)
        assert detail.images[0].image_id == alice.image_id

    async def test_get_missing_person(self, gallery):
        with pytest.raises(PersonNotFoundError):
            await gallery.get_person("nobody")

    async def test_get_image_names_each_owner(self, gallery, seeder):
        """Should show every face of an image together with its current owner."""
        group = await seeder.image("group.jpg")
        alice = await seeder.person("Alice", faces=1, image_id=group)
        bob = await seeder.person("Bob", faces=1, image_id=group)

        image = await gallery.get_image(group)

        assert image.filename == "group.jpg"
        assert image.total_faces == 2
        owners = {face.face_id: face.person_name for face in image.faces}
        assert owners == {alice.face_ids[0]: "Alice", bob.face_ids[0]: "Bob"}

    async def test_get_missing_image(self, gallery):
        with pytest.raises(ImageNotFoundError):
            await gallery.get_image("nothing")


class TestRenamePerson:

    async def test_rename_keeps_faces(self, gallery, seeder):
        """Should change only the name, never face ownership."""
        alice = await seeder.person("Alice", faces=2)

        result = await gallery.rename_person(alice.person_id, "  Alicia ")

        assert result.old_name == "Alice"
        assert result.new_name == "Alicia"
        assert await seeder.faces_of(alice.person_id) == set(alice.face_ids)
        assert await seeder.person_names() == {"Alicia"}

    @pytest.mark.parametrize("name", ["", "   "])
    async def test_blank_name_is_rejected(self, gallery, seeder, name):
        alice = await seeder.person("Alice")

        with pytest.raises(ValidationError, match="cannot be empty"):
            await gallery.rename_person(alice.person_id, name)

        assert await seeder.person_names() == {"Alice"}

    async def test_rename_missing_person(self, gallery):
        with pytest.raises(PersonNotFoundError):
            await gallery.rename_person("nobody", "Zed")


class TestStatsAndReset:

    async def test_stats_on_empty_gallery(self, gallery):
        stats = await gallery.stats()

        assert stats.total_persons == 0
        assert stats.face_coverage == 0.0
        assert stats.avg_faces_per_person == 0.0

    async def test_stats_counts(self, gallery, seeder):
        await seeder.person("Alice", faces=3)
        await seeder.person("Bob", faces=1)
        await seeder.image("empty.jpg")

        stats = await gallery.stats()

        assert stats.total_persons == 2
        assert stats.total_images == 3
        assert stats.total_faces == 4
        assert stats.images_with_faces == 2
        assert stats.images_without_faces == 1
        assert stats.face_coverage == 66.7
        assert stats.avg_faces_per_image == 1.33
        assert stats.avg_faces_per_person == 2.0

    async def test_reset_removes_everything(self, gallery, seeder):
        await seeder.person("Alice", faces=2)
        await seeder.person("Bob", faces=1)

        await gallery.reset()

        stats = await gallery.stats()
        assert (stats.total_persons, stats.total_images, stats.total_faces) == (0, 0, 0)


class TestDetectionImport:

    async def test_unassigned_faces_get_placeholder_persons(self, uow, face_locks, seeder):
        """Should give every face without a person its own placeholder person."""
        alice = await seeder.person("Alice")
        service = DetectionImportService(uow, face_locks)
        box = FaceGeometry(top=0, right=40, bottom=40, left=0)

        result = await service.register_image(
            "party.jpg",
            "image/jpeg",
            [
                DetectedFace(face_location=box, person_id=alice.person_id),
                DetectedFace(face_location=box),
                DetectedFace(face_location=box),
            ],
        )

        assert result.faces_detected == 3
        assert len(result.persons_created) == 2
        assert await seeder.owner_of(result.face_ids[0]) == alice.person_id
        names = await seeder.person_names()
        assert len(names) == 3
        assert all(name.startswith("Unknown ") for name in names - {"Alice"})

    async def test_unknown_person_stores_nothing(self, uow, face_locks, gallery):
        service = DetectionImportService(uow, face_locks)
        box = FaceGeometry(top=0, right=40, bottom=40, left=0)

        with pytest.raises(PersonNotFoundError):
            await service.register_image(
                "party.jpg", "image/jpeg", [DetectedFace(face_location=box, person_id="nobody")]
            )

        stats = await gallery.stats()
        assert (stats.total_images, stats.total_faces) == (0, 0)

    def test_inverted_box_is_rejected(self):
        with pytest.raises(ValueError):
            FaceGeometry(top=50, right=10, bottom=20, left=40)
