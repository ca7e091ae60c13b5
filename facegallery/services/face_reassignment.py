"""Face reassignment service: moves and deletes faces without leaving empty persons."""
import uuid
from typing import Optional, Set, Tuple

from facegallery.core.config import settings
from facegallery.core.exceptions import (
    ConflictError,
    PersonNotFoundError,
    ValidationError,
)
from facegallery.core.logging import get_logger
from facegallery.domain.value_objects.reassignment import (
    FaceDeleteResult,
    FaceMoveResult,
    NewPersonMoveResult,
)
from facegallery.infrastructure.database.models import Face, Person
from facegallery.infrastructure.database.unit_of_work import UnitOfWork
from facegallery.services.face_locks import FaceLockRegistry

logger = get_logger(__name__)


def unique_placeholder_name(taken: Set[str]) -> str:
    """Generate a ``"<prefix> <8 hex chars>"`` name that is not in ``taken``."""
    while True:
        candidate = f"{settings.PLACEHOLDER_NAME_PREFIX} {uuid.uuid4().hex[:8]}"
        if candidate not in taken:
            return candidate


class FaceReassignmentService:
    """Service for transferring face ownership between persons.

    Every operation runs inside a single transaction while holding the face's
    lock and then the locks of the persons it touches, taken in ID order. The
    person rows are locked in the database as well, so the remaining-face
    count used for cleanup cannot race with another move out of the same
    person, and a target that was removed meanwhile is reported as missing.

    Whenever an operation takes the last face away from a person, that person
    is deleted in the same transaction, so no caller ever observes a person
    with zero faces.

    Example:
        ```python
        service = FaceReassignmentService(uow, container.face_locks)
        result = await service.move_to_existing_person(face_id, alice_id)
        if result.deleted_empty_person:
            ...
        ```
    """

    def __init__(self, uow: UnitOfWork, locks: FaceLockRegistry) -> None:
        """Initialize the reassignment service.

        Args:
            uow: Unit of work bound to the current request's session
            locks: Process-wide face and person lock registry
        """
        self.uow = uow
        self.locks = locks

    async def move_to_existing_person(
        self,
        face_id: str,
        target_person_id: str,
        expected_person_id: Optional[str] = None,
    ) -> FaceMoveResult:
        """Move a face under an already existing person.

        Moving a face to the person that already owns it succeeds without
        changing anything and reports the same person on both sides.

        Args:
            face_id: Face to move
            target_person_id: Person that should own the face afterwards
            expected_person_id: Owner the caller believes the face has, if known

        Returns:
            FaceMoveResult describing both owners and any deleted person

        Raises:
            FaceNotFoundError: If the face does not exist
            PersonNotFoundError: If the target person does not exist
            ConflictError: If the face is owned by neither expected_person_id
                nor the target person
        """
        async with self.locks.hold(face_id):
            async with self.uow.transaction():
                source_id = await self.uow.faces.owner_id(face_id)
                async with self.locks.hold_persons(source_id, target_person_id):
                    face = await self.uow.faces.get(face_id, for_update=True)
                    persons = await self.uow.persons.lock(face.person_id, target_person_id)
                    # The target may have been emptied and removed while we waited
                    if target_person_id not in persons:
                        raise PersonNotFoundError(f"Person not found: {target_person_id}")
                    source = persons[face.person_id]
                    target = persons[target_person_id]

                    # Already at the target: a retry of a move that went through
                    if target.id == source.id:
                        logger.info(
                            "Face already owned by target person",
                            face_id=face_id,
                            person_id=target.id,
                        )
                        return FaceMoveResult(
                            face_id=face.id,
                            from_person_id=source.id,
                            from_person=source.name,
                            target_person_id=target.id,
                            to_person=target.name,
                        )

                    self._check_owner(face, expected_person_id)
                    await self.uow.faces.reassign(face, target.id)
                    deleted = await self._remove_if_empty(source)

                    logger.info(
                        "Moved face to existing person",
                        face_id=face_id,
                        from_person_id=source.id,
                        to_person_id=target.id,
                        deleted_empty_person=deleted,
                    )
                    return FaceMoveResult(
                        face_id=face.id,
                        from_person_id=source.id,
                        from_person=source.name,
                        target_person_id=target.id,
                        to_person=target.name,
                        deleted_empty_person=deleted,
                    )

    async def move_to_new_person(
        self,
        face_id: str,
        custom_name: Optional[str] = None,
        expected_person_id: Optional[str] = None,
    ) -> NewPersonMoveResult:
        """Split a face off into a freshly created person.

        Args:
            face_id: Face to move
            custom_name: Name for the new person; blank means a placeholder is used
            expected_person_id: Owner the caller believes the face has, if known

        Returns:
            NewPersonMoveResult with the new person and any deleted person

        Raises:
            FaceNotFoundError: If the face does not exist
            ConflictError: If the face is no longer owned by expected_person_id
            ValidationError: If the custom name is too long
        """
        name = self.normalize_name(custom_name)

        async with self.locks.hold(face_id):
            async with self.uow.transaction():
                source_id = await self.uow.faces.owner_id(face_id)
                async with self.locks.hold_persons(source_id):
                    face, source = await self._lock_face_and_owner(face_id)
                    self._check_owner(face, expected_person_id)

                    if name is None:
                        name = await self.placeholder_name()
                    new_person = await self.uow.persons.create(name)

                    await self.uow.faces.reassign(face, new_person.id)
                    deleted = await self._remove_if_empty(source)

                    logger.info(
                        "Moved face to new person",
                        face_id=face_id,
                        from_person_id=source.id,
                        new_person_id=new_person.id,
                        deleted_empty_person=deleted,
                    )
                    return NewPersonMoveResult(
                        face_id=face.id,
                        from_person_id=source.id,
                        from_person=source.name,
                        new_person_id=new_person.id,
                        new_person_name=new_person.name,
                        deleted_empty_person=deleted,
                    )

    async def delete_face(
        self,
        face_id: str,
        expected_person_id: Optional[str] = None,
    ) -> FaceDeleteResult:
        """Delete a face, removing its owner too if nothing else is left.

        Args:
            face_id: Face to delete
            expected_person_id: Owner the caller believes the face has, if known

        Returns:
            FaceDeleteResult naming the owner and any deleted person

        Raises:
            FaceNotFoundError: If the face does not exist
            ConflictError: If the face is no longer owned by expected_person_id
        """
        async with self.locks.hold(face_id):
            async with self.uow.transaction():
                owner_id = await self.uow.faces.owner_id(face_id)
                async with self.locks.hold_persons(owner_id):
                    face, owner = await self._lock_face_and_owner(face_id)
                    self._check_owner(face, expected_person_id)

                    await self.uow.faces.delete(face)
                    deleted = await self._remove_if_empty(owner)

                    logger.info(
                        "Deleted face",
                        face_id=face_id,
                        person_id=owner.id,
                        deleted_empty_person=deleted,
                    )
                    return FaceDeleteResult(
                        face_id=face_id,
                        from_person_id=owner.id,
                        from_person=owner.name,
                        deleted_empty_person=deleted,
                    )

    @staticmethod
    def normalize_name(name: Optional[str]) -> Optional[str]:
        """Trim an operator-supplied name; blank becomes None."""
        if name is None:
            return None
        name = name.strip()
        if not name:
            return None
        if len(name) > settings.MAX_PERSON_NAME_LENGTH:
            raise ValidationError(
                f"Person name must be at most {settings.MAX_PERSON_NAME_LENGTH} characters"
            )
        return name

    async def placeholder_name(self) -> str:
        """Generate a placeholder name not used by any person."""
        return unique_placeholder_name(await self.uow.persons.names())

    async def _lock_face_and_owner(self, face_id: str) -> Tuple[Face, Person]:
        face = await self.uow.faces.get(face_id, for_update=True)
        persons = await self.uow.persons.lock(face.person_id)
        return face, persons[face.person_id]

    async def _remove_if_empty(self, person: Person) -> Optional[str]:
        """Delete the person if it owns no faces. Returns its name when deleted."""
        remaining = await self.uow.persons.count_faces(person.id)
        if remaining > 0:
            return None
        name = person.name
        await self.uow.persons.delete(person.id)
        logger.info("Removed empty person", person_id=person.id, person_name=name)
        return name

    @staticmethod
    def _check_owner(face: Face, expected_person_id: Optional[str]) -> None:
        if expected_person_id is not None and face.person_id != expected_person_id:
            raise ConflictError(
                "Face was moved by someone else; refresh and try again",
                details={
                    "face_id": face.id,
                    "expected_person_id": expected_person_id,
                    "actual_person_id": face.person_id,
                },
            )
