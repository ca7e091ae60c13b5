"""Registration of detection results produced by the external clustering engine."""
from typing import List, Optional

from pydantic import BaseModel, Field

from facegallery.core.exceptions import PersonNotFoundError
from facegallery.core.logging import get_logger
from facegallery.domain.entities.face import FaceGeometry
from facegallery.infrastructure.database.unit_of_work import UnitOfWork
from facegallery.services.face_locks import FaceLockRegistry
from facegallery.services.face_reassignment import unique_placeholder_name
from facegallery.services.models import ServiceRegisteredImage

logger = get_logger(__name__)


class DetectedFace(BaseModel):
    """One face reported by the detection engine."""
    face_location: FaceGeometry = Field(..., description="Bounding box in source-image pixels")
    cropped_face_filename: Optional[str] = Field(None, description="Cropped thumbnail reference")
    person_id: Optional[str] = Field(
        None, description="Existing person the engine clustered this face into"
    )


class DetectionImportService:
    """Service for storing an image together with the faces detected in it.

    Faces that arrive without a person each get a new placeholder person, so
    a stored face is never without an owner. Existing persons named by the
    detections are locked while the faces are added, so a concurrent move
    cannot remove one of them as empty in the meantime.
    """

    def __init__(self, uow: UnitOfWork, locks: FaceLockRegistry) -> None:
        self.uow = uow
        self.locks = locks

    async def register_image(
        self,
        filename: str,
        mime_type: str,
        faces: List[DetectedFace],
    ) -> ServiceRegisteredImage:
        """Store an image and its detected faces in one transaction.

        Args:
            filename: Stored file name of the image
            mime_type: Image MIME type
            faces: Detections for this image

        Returns:
            ServiceRegisteredImage with the new IDs

        Raises:
            PersonNotFoundError: If a detection names a person that does not exist
        """
        face_ids: List[str] = []
        created: List[str] = []
        referenced = [d.person_id for d in faces if d.person_id is not None]

        async with self.locks.hold_persons(*referenced):
            async with self.uow.transaction():
                existing = await self.uow.persons.lock(*referenced)
                for person_id in referenced:
                    if person_id not in existing:
                        raise PersonNotFoundError(f"Person not found: {person_id}")

                image = await self.uow.images.create(filename, mime_type)
                taken = await self.uow.persons.names()

                for detected in faces:
                    if detected.person_id is not None:
                        person = existing[detected.person_id]
                    else:
                        name = unique_placeholder_name(taken)
                        taken.add(name)
                        person = await self.uow.persons.create(name)
                        created.append(person.id)

                    face = await self.uow.faces.create(
                        person_id=person.id,
                        image_id=image.id,
                        geometry=detected.face_location,
                        cropped_face_filename=detected.cropped_face_filename,
                    )
                    face_ids.append(face.id)

        logger.info(
            "Registered image",
            image_id=image.id,
            faces_detected=len(face_ids),
            persons_created=len(created),
        )
        return ServiceRegisteredImage(
            image_id=image.id,
            faces_detected=len(face_ids),
            face_ids=face_ids,
            persons_created=created,
        )
