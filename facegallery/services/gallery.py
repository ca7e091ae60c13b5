"""Gallery service: person and image views, renames, statistics and reset."""
from typing import List

from facegallery.core.config import settings
from facegallery.core.exceptions import ValidationError
from facegallery.core.logging import get_logger
from facegallery.infrastructure.database.unit_of_work import UnitOfWork
from facegallery.services.models import (
    ServiceFace,
    ServiceGalleryStats,
    ServiceImage,
    ServiceImageDetail,
    ServiceImageFace,
    ServicePersonDetail,
    ServicePersonSummary,
    ServiceRenameResult,
)

logger = get_logger(__name__)


class GalleryService:
    """Read and maintenance operations over the person/face store.

    Views are always built from the current database state. Callers that
    changed something re-request the view instead of patching an old copy.
    """

    def __init__(self, uow: UnitOfWork) -> None:
        """Initialize the gallery service.

        Args:
            uow: Unit of work bound to the current request's session
        """
        self.uow = uow

    async def list_persons(self) -> List[ServicePersonSummary]:
        """List every person with face and image counts, ordered by name."""
        rows = await self.uow.persons.list_with_counts()
        return [
            ServicePersonSummary(
                person_id=row.person.id,
                person_name=row.person.name,
                total_faces=row.total_faces,
                total_images=row.total_images,
                thumbnail=row.thumbnail,
            )
            for row in rows
        ]

    async def get_person(self, person_id: str) -> ServicePersonDetail:
        """Get a person with its faces and the images they appear in.

        Raises:
            PersonNotFoundError: If the person does not exist
        """
        person = await self.uow.persons.get(person_id)
        faces = await self.uow.faces.list_by_person(person.id)
        images = await self.uow.images.list_for_person(person.id)
        return ServicePersonDetail(
            person_id=person.id,
            person_name=person.name,
            total_faces=len(faces),
            total_images=len(images),
            faces=[ServiceFace.from_model(face) for face in faces],
            images=[
                ServiceImage(
                    image_id=image.id,
                    filename=image.filename,
                    mime_type=image.mime_type,
                    uploaded_at=image.uploaded_at,
                )
                for image in images
            ],
        )

    async def rename_person(self, person_id: str, name: str) -> ServiceRenameResult:
        """Change a person's display name. Face ownership is untouched.

        Raises:
            PersonNotFoundError: If the person does not exist
            ValidationError: If the name is blank or too long
        """
        new_name = (name or "").strip()
        if not new_name:
            raise ValidationError("Person name cannot be empty")
        if len(new_name) > settings.MAX_PERSON_NAME_LENGTH:
            raise ValidationError(
                f"Person name must be at most {settings.MAX_PERSON_NAME_LENGTH} characters"
            )

        async with self.uow.transaction():
            person = await self.uow.persons.get(person_id)
            old_name = person.name
            await self.uow.persons.rename(person, new_name)

        logger.info("Renamed person", person_id=person_id, old_name=old_name, new_name=new_name)
        return ServiceRenameResult(person_id=person_id, old_name=old_name, new_name=new_name)

    async def get_image(self, image_id: str) -> ServiceImageDetail:
        """Get an image with every face detected in it and each face's owner.

        Raises:
            ImageNotFoundError: If the image does not exist
        """
        image = await self.uow.images.get(image_id)
        faces = await self.uow.faces.list_by_image(image.id)
        return ServiceImageDetail(
            image_id=image.id,
            filename=image.filename,
            mime_type=image.mime_type,
            total_faces=len(faces),
            faces=[
                ServiceImageFace(
                    **ServiceFace.from_model(face).model_dump(),
                    person_name=face.person.name,
                )
                for face in faces
            ],
        )

    async def stats(self) -> ServiceGalleryStats:
        total_persons = await self.uow.persons.count()
        total_images = await self.uow.images.count()
        total_faces = await self.uow.faces.count()
        images_with_faces = await self.uow.images.count_with_faces()
        manual = await self.uow.faces.count_manual()

        return ServiceGalleryStats(
            total_persons=total_persons,
            total_images=total_images,
            total_faces=total_faces,
            images_with_faces=images_with_faces,
            images_without_faces=total_images - images_with_faces,
            manual_face_assignments=manual,
            face_coverage=round(100.0 * images_with_faces / total_images, 1) if total_images else 0.0,
            avg_faces_per_image=round(total_faces / total_images, 2) if total_images else 0.0,
            avg_faces_per_person=round(total_faces / total_persons, 2) if total_persons else 0.0,
        )

    async def reset(self) -> None:
        """Delete every face, person and image."""
        async with self.uow.transaction():
            await self.uow.faces.delete_all()
            await self.uow.persons.delete_all()
            await self.uow.images.delete_all()
        logger.warning("Gallery data reset")
