"""Controllers for the move-face and delete-face flows of the console.

The controllers are plain objects with async methods, independent of any UI
toolkit. A UI renders from their state (``phase``, ``dialog_open``,
``in_progress``, ``persons``) and forwards operator actions to them. Side
effects on the surrounding UI go through two small callbacks: a
``Navigator`` and a ``Notifier``.

Local counts are never patched after a mutation. Success navigates to the
destination view (which fetches fresh data), and anything else that might
be stale is refreshed through the ``on_refresh`` callback.
"""
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Protocol, Set

from facegallery.api.models.faces import (
    DeleteFaceResponse,
    MoveFaceResponse,
    MoveFaceToNewPersonResponse,
)
from facegallery.api.models.persons import PersonSummary
from facegallery.client.api_client import GalleryApiClient
from facegallery.client.results import OperationError, OperationResult
from facegallery.core.logging import get_logger

logger = get_logger(__name__)

RefreshCallback = Callable[[], Awaitable[None]]


class Navigator(Protocol):
    """Where the console goes after an operation."""

    def show_person(self, person_id: str) -> None:
        ...

    def show_persons(self) -> None:
        ...


class Notifier(Protocol):
    """How the console tells the operator what happened."""

    def success(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


class InFlightFaces:
    """Face IDs with a mutation currently awaiting its response.

    Shared by every controller of one console session so that two views
    cannot send overlapping mutations for the same face.
    """

    def __init__(self) -> None:
        self._faces: Set[str] = set()

    def claim(self, face_id: str) -> bool:
        if face_id in self._faces:
            return False
        self._faces.add(face_id)
        return True

    def release(self, face_id: str) -> None:
        self._faces.discard(face_id)

    def __contains__(self, face_id: object) -> bool:
        return face_id in self._faces


class MovePhase(str, Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    SUBMITTING = "submitting"
    RESOLVED = "resolved"


class DeletePhase(str, Enum):
    IDLE = "idle"
    CONFIRMING = "confirming"
    SUBMITTING = "submitting"
    RESOLVED = "resolved"


def move_notice(deleted_empty_person: Optional[str], new_person: bool = False) -> str:
    """Operator message for a successful move."""
    base = "Face moved to new person successfully!" if new_person else "Face moved successfully!"
    if deleted_empty_person:
        return f'{base} Empty person "{deleted_empty_person}" was automatically deleted.'
    return base


def delete_notice(deleted_empty_person: Optional[str]) -> str:
    """Operator message for a successful delete."""
    if deleted_empty_person:
        return (
            f'Face deleted successfully! Empty person "{deleted_empty_person}" '
            "was automatically deleted."
        )
    return "Face deleted successfully!"


class _FlowBase:
    """Wiring shared by both flows."""

    def __init__(
        self,
        client: GalleryApiClient,
        navigator: Navigator,
        notifier: Notifier,
        in_flight: Optional[InFlightFaces] = None,
        on_refresh: Optional[RefreshCallback] = None,
    ) -> None:
        self.client = client
        self.navigator = navigator
        self.notifier = notifier
        self.in_flight = in_flight if in_flight is not None else InFlightFaces()
        self.on_refresh = on_refresh
        self.attached = True

    def detach(self) -> None:
        """Stop touching the UI; responses still resolve the controller's state."""
        self.attached = False

    def _notify_success(self, message: str) -> None:
        if self.attached:
            self.notifier.success(message)

    def _notify_error(self, message: str) -> None:
        if self.attached:
            self.notifier.error(message)

    async def _refresh(self) -> None:
        if self.attached and self.on_refresh is not None:
            await self.on_refresh()


class FaceMoveController(_FlowBase):
    """State machine for moving one face: Idle → Selecting → Submitting → Resolved.

    A resolved error keeps the dialog open so the operator can pick again or
    retry; a resolved success closes it and navigates to the destination.

    Example:
        ```python
        controller = FaceMoveController(client, navigator, notifier)
        await controller.open(face_id, source_person_id=person_id)
        for person in controller.candidates("ali"):
            ...
        await controller.move_to_existing(person.person_id)
        ```
    """

    def __init__(
        self,
        client: GalleryApiClient,
        navigator: Navigator,
        notifier: Notifier,
        in_flight: Optional[InFlightFaces] = None,
        on_refresh: Optional[RefreshCallback] = None,
    ) -> None:
        super().__init__(client, navigator, notifier, in_flight, on_refresh)
        self.phase = MovePhase.IDLE
        self.face_id: Optional[str] = None
        self.source_person_id: Optional[str] = None
        self.persons: List[PersonSummary] = []
        self.outcome: Optional[OperationResult[Any]] = None

    @property
    def in_progress(self) -> bool:
        """True while a request is outstanding; the UI disables its controls."""
        return self.phase == MovePhase.SUBMITTING

    @property
    def dialog_open(self) -> bool:
        if self.phase in (MovePhase.SELECTING, MovePhase.SUBMITTING):
            return True
        return self.phase == MovePhase.RESOLVED and isinstance(self.outcome, OperationError)

    @property
    def last_error(self) -> Optional[str]:
        if isinstance(self.outcome, OperationError):
            return self.outcome.reason
        return None

    async def open(self, face_id: str, source_person_id: Optional[str] = None) -> bool:
        """Start choosing a destination for a face and refresh the picker list.

        The persons list is advisory: if it cannot be fetched, the previous
        list is kept and the server still validates the chosen target.

        Returns:
            False if a move is still being submitted
        """
        if self.phase == MovePhase.SUBMITTING:
            return False

        self.phase = MovePhase.SELECTING
        self.face_id = face_id
        self.source_person_id = source_person_id
        self.outcome = None

        result = await self.client.list_persons()
        if result.kind == "success":
            self.persons = result.value.persons
        else:
            logger.warning("Could not refresh persons list", reason=result.reason)
            self._notify_error(result.reason)
        return True

    def candidates(self, query: str = "") -> List[PersonSummary]:
        """Persons the face can be moved to, filtered by a case-insensitive name search."""
        needle = query.strip().lower()
        return [
            person
            for person in self.persons
            if person.person_id != self.source_person_id
            and needle in person.person_name.lower()
        ]

    def cancel(self) -> bool:
        """Abandon the selection. Has no effect once a request was sent."""
        if self.phase == MovePhase.SUBMITTING:
            return False
        self._reset()
        return True

    async def move_to_existing(self, target_person_id: str) -> OperationResult[MoveFaceResponse]:
        """Send the face to an existing person."""
        rejected = self._begin()
        if rejected is not None:
            return rejected

        face_id = self.face_id
        try:
            result = await self.client.move_face_to_person(
                face_id, target_person_id, expected_person_id=self.source_person_id
            )
        finally:
            self.in_flight.release(face_id)

        if result.kind == "success":
            await self._succeed(
                result,
                move_notice(result.value.deleted_empty_person),
                destination=result.value.target_person_id,
            )
        else:
            await self._fail(result)
        return result

    async def move_to_new(
        self, custom_name: Optional[str] = None
    ) -> OperationResult[MoveFaceToNewPersonResponse]:
        """Split the face off into a new person, optionally named."""
        rejected = self._begin()
        if rejected is not None:
            return rejected

        face_id = self.face_id
        try:
            result = await self.client.move_face_to_new_person(
                face_id, custom_name, expected_person_id=self.source_person_id
            )
        finally:
            self.in_flight.release(face_id)

        if result.kind == "success":
            await self._succeed(
                result,
                move_notice(result.value.deleted_empty_person, new_person=True),
                destination=result.value.new_person_id,
            )
        else:
            await self._fail(result)
        return result

    def _begin(self) -> Optional[OperationError]:
        """Enter Submitting, or explain why a submission is not allowed now."""
        if self.face_id is None or not self.dialog_open:
            return OperationError(reason="No face selected to move")
        if self.in_progress:
            return OperationError(reason="This move is already being submitted")
        if not self.in_flight.claim(self.face_id):
            return OperationError(reason="Another change to this face is still in progress")
        self.phase = MovePhase.SUBMITTING
        return None

    async def _succeed(self, result: OperationResult[Any], message: str, destination: str) -> None:
        self.phase = MovePhase.RESOLVED
        self.outcome = result
        logger.info("Face moved", face_id=self.face_id, person_id=destination)
        self._notify_success(message)
        if self.attached:
            self.navigator.show_person(destination)

    async def _fail(self, result: OperationError) -> None:
        self.phase = MovePhase.RESOLVED
        self.outcome = result
        logger.warning("Face move failed", face_id=self.face_id, reason=result.reason)
        self._notify_error(result.reason)
        if result.is_conflict or result.is_not_found:
            await self._refresh()

    def _reset(self) -> None:
        self.phase = MovePhase.IDLE
        self.face_id = None
        self.source_person_id = None
        self.outcome = None


class FaceDeleteController(_FlowBase):
    """State machine for deleting one face: Idle → Confirming → Submitting → Resolved.

    On failure the confirmation stays open and nothing else changes.
    """

    def __init__(
        self,
        client: GalleryApiClient,
        navigator: Navigator,
        notifier: Notifier,
        in_flight: Optional[InFlightFaces] = None,
        on_refresh: Optional[RefreshCallback] = None,
    ) -> None:
        super().__init__(client, navigator, notifier, in_flight, on_refresh)
        self.phase = DeletePhase.IDLE
        self.face_id: Optional[str] = None
        self.owner_person_id: Optional[str] = None
        self.outcome: Optional[OperationResult[Any]] = None

    @property
    def in_progress(self) -> bool:
        return self.phase == DeletePhase.SUBMITTING

    @property
    def confirm_open(self) -> bool:
        return self.phase in (DeletePhase.CONFIRMING, DeletePhase.SUBMITTING)

    def request(self, face_id: str, owner_person_id: Optional[str] = None) -> bool:
        """Ask the operator to confirm deleting a face."""
        if self.phase == DeletePhase.SUBMITTING:
            return False
        self.phase = DeletePhase.CONFIRMING
        self.face_id = face_id
        self.owner_person_id = owner_person_id
        self.outcome = None
        return True

    def cancel(self) -> bool:
        if self.phase == DeletePhase.SUBMITTING:
            return False
        self.phase = DeletePhase.IDLE
        self.face_id = None
        self.owner_person_id = None
        return True

    async def confirm(self) -> OperationResult[DeleteFaceResponse]:
        """Delete the face the operator confirmed."""
        if self.phase != DeletePhase.CONFIRMING or self.face_id is None:
            return OperationError(reason="No face selected to delete")
        face_id = self.face_id
        if not self.in_flight.claim(face_id):
            return OperationError(reason="Another change to this face is still in progress")

        self.phase = DeletePhase.SUBMITTING
        try:
            result = await self.client.delete_face(face_id, expected_person_id=self.owner_person_id)
        finally:
            self.in_flight.release(face_id)

        self.outcome = result
        if result.kind == "success":
            self.phase = DeletePhase.RESOLVED
            deleted = result.value.deleted_empty_person
            logger.info("Face deleted", face_id=face_id, deleted_empty_person=deleted)
            self._notify_success(delete_notice(deleted))
            if deleted:
                if self.attached:
                    self.navigator.show_persons()
            else:
                await self._refresh()
        else:
            self.phase = DeletePhase.CONFIRMING
            logger.warning("Face delete failed", face_id=face_id, reason=result.reason)
            self._notify_error(result.reason)
            if result.is_conflict or result.is_not_found:
                await self._refresh()
        return result
