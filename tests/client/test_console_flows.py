"""Console flows driven end to end against the in-process API."""
from facegallery.client.controller import FaceDeleteController, FaceMoveController
from facegallery.client.views import ImageDetailView, PersonDetailView


class Navigator:

    def __init__(self) -> None:
        self.visits = []

    def show_person(self, person_id: str) -> None:
        self.visits.append(person_id)

    def show_persons(self) -> None:
        self.visits.append("persons")


class Notifier:

    def __init__(self) -> None:
        self.successes = []
        self.errors = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


async def test_moving_last_face_away(api_client, seeder):
    """Should land on the target with fresh counts while the source page is gone."""
    alice = await seeder.person("Alice", faces=3)
    bob = await seeder.person("Bob", faces=1)
    navigator, notifier = Navigator(), Notifier()
    source_view = PersonDetailView(api_client, bob.person_id)
    await source_view.refresh()
    controller = FaceMoveController(api_client, navigator, notifier, on_refresh=source_view.refresh)

    await controller.open(bob.face_ids[0], source_person_id=bob.person_id)
    assert [p.person_name for p in controller.candidates()] == ["Alice"]
    result = await controller.move_to_existing(alice.person_id)

    assert result.kind == "success"
    assert navigator.visits == [alice.person_id]
    assert notifier.successes == [
        'Face moved successfully! Empty person "Bob" was automatically deleted.'
    ]

    target_view = PersonDetailView(api_client, alice.person_id)
    await target_view.refresh()
    assert target_view.detail.total_faces == 4

    await source_view.refresh()
    assert source_view.missing
    assert source_view.error == f"Person not found: {bob.person_id}"


async def test_split_into_named_person(api_client, seeder):
    bob = await seeder.person("Bob", faces=1)
    navigator, notifier = Navigator(), Notifier()
    controller = FaceMoveController(api_client, navigator, notifier)

    await controller.open(bob.face_ids[0], source_person_id=bob.person_id)
    result = await controller.move_to_new("Charlie")

    view = PersonDetailView(api_client, result.value.new_person_id)
    await view.refresh()
    assert view.detail.person_name == "Charlie"
    assert navigator.visits == [result.value.new_person_id]
    assert result.value.deleted_empty_person == "Bob"


async def test_stale_view_gets_conflict_and_refreshes(api_client, seeder):
    """Should refuse a move based on an outdated owner and reload the page."""
    alice = await seeder.person("Alice")
    bob = await seeder.person("Bob", faces=2)
    carol = await seeder.person("Carol")
    bob_view = PersonDetailView(api_client, bob.person_id)
    await bob_view.refresh()

    other_console = FaceMoveController(api_client, Navigator(), Notifier())
    await other_console.open(bob.face_ids[0], source_person_id=bob.person_id)
    await other_console.move_to_existing(alice.person_id)

    navigator, notifier = Navigator(), Notifier()
    controller = FaceMoveController(api_client, navigator, notifier, on_refresh=bob_view.refresh)
    await controller.open(bob.face_ids[0], source_person_id=bob.person_id)
    result = await controller.move_to_existing(carol.person_id)

    assert result.kind == "error"
    assert result.is_conflict
    assert controller.dialog_open
    assert notifier.errors == ["Face was moved by someone else; refresh and try again"]
    assert bob_view.detail.total_faces == 1
    assert await seeder.owner_of(bob.face_ids[0]) == alice.person_id


async def test_deleting_last_face(api_client, seeder):
    dave = await seeder.person("Dave", faces=1)
    navigator, notifier = Navigator(), Notifier()
    controller = FaceDeleteController(api_client, navigator, notifier)

    controller.request(dave.face_ids[0], owner_person_id=dave.person_id)
    await controller.confirm()

    assert navigator.visits == ["persons"]
    assert notifier.successes == [
        'Face deleted successfully! Empty person "Dave" was automatically deleted.'
    ]
    persons = await api_client.list_persons()
    assert persons.value.total == 0


async def test_image_view_follows_moves(api_client, seeder):
    group = await seeder.image("group.jpg")
    alice = await seeder.person("Alice", faces=1, image_id=group)
    bob = await seeder.person("Bob", faces=1, image_id=group)
    view = ImageDetailView(api_client, group)

    controller = FaceMoveController(api_client, Navigator(), Notifier())
    await controller.open(bob.face_ids[0], source_person_id=bob.person_id)
    await controller.move_to_existing(alice.person_id)
    await view.refresh()

    assert {face.person.person_name for face in view.detail.faces} == {"Alice"}


async def test_rename_from_person_view(api_client, seeder):
    alice = await seeder.person("Alice", faces=2)
    view = PersonDetailView(api_client, alice.person_id)
    notifier = Notifier()

    assert not await view.rename("   ", notifier)
    assert notifier.errors == ["Person name cannot be empty"]

    assert await view.rename("Alicia", notifier)
    assert view.detail.person_name == "Alicia"
    assert view.detail.total_faces == 2


async def test_image_page_refreshes_after_refused_move(api_client, seeder):
    """Should reload the image page when a move from it is refused, showing the real owner."""
    group = await seeder.image("group.jpg")
    alice = await seeder.person("Alice", faces=1, image_id=group)
    bob = await seeder.person("Bob", faces=2, image_id=group)
    carol = await seeder.person("Carol", faces=1)
    view = ImageDetailView(api_client, group)
    await view.refresh()
    stale_owner = {face.face_id: face.person.person_id for face in view.detail.faces}

    other_console = FaceMoveController(api_client, Navigator(), Notifier())
    await other_console.open(bob.face_ids[0], source_person_id=bob.person_id)
    await other_console.move_to_existing(alice.person_id)

    navigator, notifier = Navigator(), Notifier()
    controller = FaceMoveController(api_client, navigator, notifier, on_refresh=view.refresh)
    await controller.open(bob.face_ids[0], source_person_id=stale_owner[bob.face_ids[0]])
    result = await controller.move_to_existing(carol.person_id)

    assert result.is_conflict
    assert navigator.visits == []
    owners = {face.face_id: face.person.person_name for face in view.detail.faces}
    assert owners[bob.face_ids[0]] == "Alice"

    await controller.open(bob.face_ids[0], source_person_id=alice.person_id)
    result = await controller.move_to_existing(carol.person_id)

    assert result.kind == "success"
    assert navigator.visits == [carol.person_id]
