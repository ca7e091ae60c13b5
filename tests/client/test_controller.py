"""Tests for the move and delete flow controllers."""
import asyncio
from typing import List, Optional, Tuple

import pytest

from facegallery.api.models.faces import (
    DeleteFaceResponse,
    MoveFaceResponse,
    MoveFaceToNewPersonResponse,
)
from facegallery.api.models.persons import PersonListResponse, PersonSummary
from facegallery.client.controller import (
    DeletePhase,
    FaceDeleteController,
    FaceMoveController,
    InFlightFaces,
    MovePhase,
)
from facegallery.client.results import OperationError, OperationSuccess


def persons_response(*names: str) -> PersonListResponse:
    persons = [
        PersonSummary(person_id=f"p-{name.lower()}", person_name=name, total_faces=1, total_images=1)
        for name in names
    ]
    return PersonListResponse(persons=persons, total=len(persons))


def moved(target: str = "p-alice", deleted: Optional[str] = None) -> OperationSuccess:
    return OperationSuccess(
        value=MoveFaceResponse(
            message="moved",
            face_id="f1",
            from_person="Bob",
            to_person="Alice",
            target_person_id=target,
            deleted_empty_person=deleted,
        )
    )


class FakeClient:
    """Stands in for GalleryApiClient; answers from queued results."""

    def __init__(self) -> None:
        self.calls: List[Tuple] = []
        self.persons = OperationSuccess(value=persons_response("Alice", "Bob", "Carol"))
        self.move_result = moved()
        self.new_person_result = OperationSuccess(
            value=MoveFaceToNewPersonResponse(
                message="moved",
                face_id="f1",
                from_person="Bob",
                new_person_id="p-new",
                new_person_name="Unknown 1a2b3c4d",
            )
        )
        self.delete_result = OperationSuccess(
            value=DeleteFaceResponse(message="deleted", face_id="f1", from_person="Bob")
        )
        self.gate: Optional[asyncio.Event] = None

    async def _wait(self) -> None:
        if self.gate is not None:
            await self.gate.wait()

    async def list_persons(self):
        self.calls.append(("list_persons",))
        return self.persons

    async def move_face_to_person(self, face_id, target_person_id, expected_person_id=None):
        self.calls.append(("move", face_id, target_person_id, expected_person_id))
        await self._wait()
        return self.move_result

    async def move_face_to_new_person(self, face_id, custom_name=None, expected_person_id=None):
        self.calls.append(("move_new", face_id, custom_name, expected_person_id))
        await self._wait()
        return self.new_person_result

    async def delete_face(self, face_id, expected_person_id=None):
        self.calls.append(("delete", face_id, expected_person_id))
        await self._wait()
        return self.delete_result


class RecordingNavigator:

    def __init__(self) -> None:
        self.visits: List[str] = []

    def show_person(self, person_id: str) -> None:
        self.visits.append(person_id)

    def show_persons(self) -> None:
        self.visits.append("persons")


class RecordingNotifier:

    def __init__(self) -> None:
        self.successes: List[str] = []
        self.errors: List[str] = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


class RefreshCounter:

    def __init__(self) -> None:
        self.count = 0

    async def __call__(self) -> None:
        self.count += 1


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def refresh() -> RefreshCounter:
    return RefreshCounter()


@pytest.fixture
def in_flight() -> InFlightFaces:
    return InFlightFaces()


@pytest.fixture
def mover(client, navigator, notifier, in_flight, refresh) -> FaceMoveController:
    return FaceMoveController(client, navigator, notifier, in_flight=in_flight, on_refresh=refresh)


@pytest.fixture
def deleter(client, navigator, notifier, in_flight, refresh) -> FaceDeleteController:
    return FaceDeleteController(client, navigator, notifier, in_flight=in_flight, on_refresh=refresh)


class TestFaceMoveController:

    async def test_open_fetches_candidates(self, mover, client):
        """Should fetch a fresh persons list and hide the current owner."""
        assert await mover.open("f1", source_person_id="p-bob")

        assert mover.phase == MovePhase.SELECTING
        assert mover.dialog_open
        assert client.calls == [("list_persons",)]
        assert [p.person_name for p in mover.candidates()] == ["Alice", "Carol"]
        assert [p.person_name for p in mover.candidates("  CAR ")] == ["Carol"]

    async def test_open_refetches_every_time(self, mover, client):
        await mover.open("f1", source_person_id="p-bob")
        mover.cancel()
        client.persons = OperationSuccess(value=persons_response("Alice", "Bob", "Zoe"))

        await mover.open("f2", source_person_id="p-bob")

        assert [p.person_name for p in mover.candidates()] == ["Alice", "Zoe"]

    async def test_failed_persons_fetch_keeps_dialog_usable(self, mover, client, notifier):
        await mover.open("f1", source_person_id="p-bob")
        client.persons = OperationError(reason="Failed to fetch persons", status_code=500)

        await mover.open("f1", source_person_id="p-bob")

        assert mover.phase == MovePhase.SELECTING
        assert notifier.errors == ["Failed to fetch persons"]
        assert len(mover.candidates()) == 2

    async def test_success_navigates_to_target(self, mover, client, navigator, notifier):
        """Should send the expected owner, then notify and show the target person."""
        client.move_result = moved(deleted="Bob")
        await mover.open("f1", source_person_id="p-bob")

        result = await mover.move_to_existing("p-alice")

        assert result.kind == "success"
        assert client.calls[-1] == ("move", "f1", "p-alice", "p-bob")
        assert mover.phase == MovePhase.RESOLVED
        assert not mover.dialog_open
        assert navigator.visits == ["p-alice"]
        assert notifier.successes == [
            'Face moved successfully! Empty person "Bob" was automatically deleted.'
        ]

    async def test_success_without_cleanup(self, mover, notifier):
        await mover.open("f1", source_person_id="p-bob")

        await mover.move_to_existing("p-alice")

        assert notifier.successes == ["Face moved successfully!"]

    async def test_move_to_new_navigates_to_new_person(self, mover, client, navigator, notifier):
        await mover.open("f1", source_person_id="p-bob")

        await mover.move_to_new("  ")

        assert client.calls[-1] == ("move_new", "f1", "  ", "p-bob")
        assert navigator.visits == ["p-new"]
        assert notifier.successes == ["Face moved to new person successfully!"]

    async def test_error_keeps_dialog_open(self, mover, client, navigator, notifier, refresh):
        """Should show the server's reason and let the operator pick again."""
        client.move_result = OperationError(reason="Person not found: p-alice", status_code=404)
        await mover.open("f1", source_person_id="p-bob")

        result = await mover.move_to_existing("p-alice")

        assert result.kind == "error"
        assert mover.dialog_open
        assert mover.last_error == "Person not found: p-alice"
        assert notifier.errors == ["Person not found: p-alice"]
        assert navigator.visits == []
        assert refresh.count == 1

        client.move_result = moved(target="p-carol")
        result = await mover.move_to_existing("p-carol")

        assert result.kind == "success"
        assert navigator.visits == ["p-carol"]

    async def test_server_error_does_not_refresh(self, mover, client, refresh):
        client.move_result = OperationError(reason="Failed to move face", status_code=500)
        await mover.open("f1", source_person_id="p-bob")

        await mover.move_to_existing("p-alice")

        assert refresh.count == 0

    async def test_double_submit_is_rejected(self, mover, client):
        """Should send exactly one request while a move is outstanding."""
        client.gate = asyncio.Event()
        await mover.open("f1", source_person_id="p-bob")

        first = asyncio.create_task(mover.move_to_existing("p-alice"))
        await asyncio.sleep(0)
        assert mover.in_progress

        second = await mover.move_to_existing("p-carol")
        assert second.reason == "This move is already being submitted"
        assert not mover.cancel()
        assert not await mover.open("f2")

        client.gate.set()
        assert (await first).kind == "success"
        assert [c for c in client.calls if c[0] == "move"] == [("move", "f1", "p-alice", "p-bob")]

    async def test_shared_in_flight_blocks_delete_of_moving_face(self, mover, deleter, client):
        client.gate = asyncio.Event()
        await mover.open("f1", source_person_id="p-bob")
        task = asyncio.create_task(mover.move_to_existing("p-alice"))
        await asyncio.sleep(0)

        deleter.request("f1", owner_person_id="p-bob")
        result = await deleter.confirm()

        assert result.reason == "Another change to this face is still in progress"
        client.gate.set()
        await task
        assert "f1" not in mover.in_flight

    async def test_move_without_open(self, mover, client):
        result = await mover.move_to_existing("p-alice")

        assert result.reason == "No face selected to move"
        assert client.calls == []

    async def test_detached_controller_leaves_ui_alone(self, mover, client, navigator, notifier):
        """Should still resolve but skip navigation once the view is gone."""
        client.gate = asyncio.Event()
        await mover.open("f1", source_person_id="p-bob")
        task = asyncio.create_task(mover.move_to_existing("p-alice"))
        await asyncio.sleep(0)

        mover.detach()
        client.gate.set()
        await task

        assert mover.phase == MovePhase.RESOLVED
        assert navigator.visits == []
        assert notifier.successes == []

    async def test_cancel_resets(self, mover):
        await mover.open("f1", source_person_id="p-bob")

        assert mover.cancel()
        assert mover.phase == MovePhase.IDLE
        assert mover.face_id is None


class TestFaceDeleteController:

    async def test_delete_with_owner_remaining_refreshes(self, deleter, client, navigator, notifier, refresh):
        deleter.request("f1", owner_person_id="p-bob")

        result = await deleter.confirm()

        assert result.kind == "success"
        assert client.calls == [("delete", "f1", "p-bob")]
        assert deleter.phase == DeletePhase.RESOLVED
        assert notifier.successes == ["Face deleted successfully!"]
        assert refresh.count == 1
        assert navigator.visits == []

    async def test_delete_last_face_goes_to_persons_list(self, deleter, client, navigator, notifier, refresh):
        """Should leave the deleted person's page for the persons list."""
        client.delete_result = OperationSuccess(
            value=DeleteFaceResponse(
                message="deleted", face_id="f1", from_person="Dave", deleted_empty_person="Dave"
            )
        )
        deleter.request("f1", owner_person_id="p-dave")

        await deleter.confirm()

        assert navigator.visits == ["persons"]
        assert refresh.count == 0
        assert notifier.successes == [
            'Face deleted successfully! Empty person "Dave" was automatically deleted.'
        ]

    async def test_failure_keeps_confirmation(self, deleter, client, notifier, refresh):
        client.delete_result = OperationError(reason="Face not found: f1", status_code=404)
        deleter.request("f1")

        result = await deleter.confirm()

        assert result.kind == "error"
        assert deleter.confirm_open
        assert notifier.errors == ["Face not found: f1"]
        assert refresh.count == 1

    async def test_transport_failure_is_reported(self, deleter, client, notifier, refresh):
        client.delete_result = OperationError(reason="Failed to delete face", transport=True)
        deleter.request("f1")

        await deleter.confirm()

        assert notifier.errors == ["Failed to delete face"]
        assert refresh.count == 0

    async def test_confirm_without_request(self, deleter, client):
        result = await deleter.confirm()

        assert result.reason == "No face selected to delete"
        assert client.calls == []

    async def test_cancel_while_submitting_is_ignored(self, deleter, client):
        client.gate = asyncio.Event()
        deleter.request("f1")
        task = asyncio.create_task(deleter.confirm())
        await asyncio.sleep(0)

        assert deleter.in_progress
        assert not deleter.cancel()
        assert not deleter.request("f2")

        client.gate.set()
        await task
        assert deleter.phase == DeletePhase.RESOLVED
