"""Database repositories for the face gallery store."""
from typing import Dict, List, NamedTuple, Optional, Set

from sqlalchemy import delete, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from facegallery.core.exceptions import (
    FaceNotFoundError,
    ImageNotFoundError,
    PersonNotFoundError,
)
from facegallery.domain.entities.face import FaceGeometry
from facegallery.infrastructure.database.models import Face, Image, Person


class PersonCounts(NamedTuple):
    """Person row with its derived membership counts."""
    person: Person
    total_faces: int
    total_images: int
    thumbnail: Optional[str]


class PersonRepository:
    """Repository for person operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository.

        Args:
            session: Database session
        """
        self._session = session

    async def get(self, person_id: str) -> Person:
        """Get person by ID.

        Args:
            person_id: Person identifier

        Returns:
            Person: Found person

        Raises:
            PersonNotFoundError: If person not found
        """
        person = await self._session.get(Person, person_id)
        if person is None:
            raise PersonNotFoundError(f"Person not found: {person_id}")
        return person

    async def lock(self, *person_ids: str) -> Dict[str, Person]:
        """Load persons and lock their rows until the transaction ends.

        Rows are locked in ID order. Persons that no longer exist are
        simply absent from the result.

        Args:
            person_ids: Person identifiers

        Returns:
            Dict[str, Person]: Found persons keyed by ID
        """
        stmt = (
            select(Person)
            .where(Person.id.in_(set(person_ids)))
            .order_by(Person.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return {person.id: person for person in result.scalars().all()}

    async def create(self, name: str) -> Person:
        """Create a new person.

        Args:
            name: Display name

        Returns:
            Person: Created person
        """
        person = Person(name=name)
        self._session.add(person)
        await self._session.flush()
        return person

    async def rename(self, person: Person, name: str) -> Person:
        person.name = name
        await self._session.flush()
        return person

    async def delete(self, person_id: str) -> None:
        """Delete a person row. Callers guarantee it owns no faces."""
        await self._session.execute(delete(Person).where(Person.id == person_id))

    async def count_faces(self, person_id: str) -> int:
        """Count the faces currently owned by a person."""
        stmt = select(func.count(Face.id)).where(Face.person_id == person_id)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def names(self) -> Set[str]:
        """Get every person name currently in use."""
        result = await self._session.execute(select(Person.name))
        return set(result.scalars().all())

    async def list_with_counts(self) -> List[PersonCounts]:
        """List persons ordered by name, each with face/image counts and a thumbnail."""
        stmt = (
            select(
                Person,
                func.count(Face.id),
                func.count(distinct(Face.image_id)),
                func.min(Face.cropped_face_filename),
            )
            .outerjoin(Face, Face.person_id == Person.id)
            .group_by(Person.id)
            .order_by(Person.name, Person.id)
        )
        result = await self._session.execute(stmt)
        return [PersonCounts(*row) for row in result.all()]

    async def count(self) -> int:
        result = await self._session.execute(select(func.count(Person.id)))
        return result.scalar_one()

    async def delete_all(self) -> None:
        await self._session.execute(delete(Person))


class FaceRepository:
    """Repository for face operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository.

        Args:
            session: Database session
        """
        self._session = session

    async def get(self, face_id: str, for_update: bool = False) -> Face:
        """Get face by ID with its owner loaded.

        Args:
            face_id: Face identifier
            for_update: Lock the face row until the transaction ends

        Returns:
            Face: Found face

        Raises:
            FaceNotFoundError: If face not found
        """
        stmt = (
            select(Face)
            .where(Face.id == face_id)
            .options(joinedload(Face.person, innerjoin=True))
        )
        if for_update:
            stmt = stmt.with_for_update(of=Face)
        result = await self._session.execute(stmt)
        face = result.scalar_one_or_none()

        if face is None:
            raise FaceNotFoundError(f"Face not found: {face_id}")

        return face

    async def owner_id(self, face_id: str) -> str:
        """Get the ID of the person currently owning a face.

        Raises:
            FaceNotFoundError: If face not found
        """
        result = await self._session.execute(select(Face.person_id).where(Face.id == face_id))
        person_id = result.scalar_one_or_none()
        if person_id is None:
            raise FaceNotFoundError(f"Face not found: {face_id}")
        return person_id

    async def create(
        self,
        person_id: str,
        image_id: str,
        geometry: FaceGeometry,
        cropped_face_filename: Optional[str] = None,
    ) -> Face:
        """Create a new face record.

        Args:
            person_id: Owning person
            image_id: Image the face was detected in
            geometry: Bounding box in source-image pixels
            cropped_face_filename: Optional cropped thumbnail reference

        Returns:
            Face: Created face record
        """
        face = Face(
            person_id=person_id,
            image_id=image_id,
            bbox_top=geometry.top,
            bbox_right=geometry.right,
            bbox_bottom=geometry.bottom,
            bbox_left=geometry.left,
            cropped_face_filename=cropped_face_filename,
        )
        self._session.add(face)
        await self._session.flush()
        return face

    async def reassign(self, face: Face, person_id: str) -> Face:
        """Point a face at a different owner and flush the change.

        The flush is required so that follow-up count queries in the same
        transaction see the new ownership.
        """
        face.person_id = person_id
        face.manually_assigned = True
        await self._session.flush()
        return face

    async def delete(self, face: Face) -> None:
        await self._session.delete(face)
        await self._session.flush()

    async def list_by_person(self, person_id: str) -> List[Face]:
        stmt = (
            select(Face)
            .where(Face.person_id == person_id)
            .order_by(Face.created_at, Face.id)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_image(self, image_id: str) -> List[Face]:
        """Get faces detected in an image, each with its owner loaded."""
        stmt = (
            select(Face)
            .where(Face.image_id == image_id)
            .options(joinedload(Face.person, innerjoin=True))
            .order_by(Face.bbox_left, Face.id)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self._session.execute(select(func.count(Face.id)))
        return result.scalar_one()

    async def count_manual(self) -> int:
        stmt = select(func.count(Face.id)).where(Face.manually_assigned.is_(True))
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def delete_all(self) -> None:
        await self._session.execute(delete(Face))


class ImageRepository:
    """Repository for image operations."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, image_id: str) -> Image:
        """Get image by ID.

        Raises:
            ImageNotFoundError: If image not found
        """
        image = await self._session.get(Image, image_id)
        if image is None:
            raise ImageNotFoundError(f"Image not found: {image_id}")
        return image

    async def create(self, filename: str, mime_type: str) -> Image:
        image = Image(filename=filename, mime_type=mime_type)
        self._session.add(image)
        await self._session.flush()
        return image

    async def list_for_person(self, person_id: str) -> List[Image]:
        """Get the distinct images containing at least one face of a person."""
        stmt = (
            select(Image)
            .where(Image.id.in_(select(Face.image_id).where(Face.person_id == person_id)))
            .order_by(Image.uploaded_at, Image.id)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self._session.execute(select(func.count(Image.id)))
        return result.scalar_one()

    async def count_with_faces(self) -> int:
        stmt = select(func.count(distinct(Face.image_id)))
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def delete_all(self) -> None:
        await self._session.execute(delete(Image))
