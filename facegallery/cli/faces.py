"""CLI tool for inspecting persons and moving or deleting faces."""
import argparse
import asyncio
import sys
from typing import List, Optional

from facegallery.client import (
    FaceDeleteController,
    FaceMoveController,
    GalleryApiClient,
    ImageDetailView,
    PersonDetailView,
)
from facegallery.core.config import settings
from facegallery.core.logging import setup_logging


class PrintNavigator:
    """Navigator that reports where the console would go next."""

    def show_person(self, person_id: str) -> None:
        print(f"-> person {person_id}")

    def show_persons(self) -> None:
        print("-> persons list")


class PrintNotifier:
    """Notifier that writes successes to stdout and errors to stderr."""

    def success(self, message: str) -> None:
        print(message)

    def error(self, message: str) -> None:
        print(f"Error: {message}", file=sys.stderr)


async def list_persons(client: GalleryApiClient) -> int:
    result = await client.list_persons()
    if result.kind == "error":
        PrintNotifier().error(result.reason)
        return 1
    for person in result.value.persons:
        print(f"{person.person_id}  {person.person_name}  "
              f"({person.total_faces} faces, {person.total_images} images)")
    print(f"{result.value.total} persons")
    return 0


async def show_person(client: GalleryApiClient, person_id: str) -> int:
    view = PersonDetailView(client, person_id)
    await view.refresh()
    if view.detail is None:
        PrintNotifier().error(view.error or "Failed to fetch person details")
        return 1
    person = view.detail
    print(f"{person.person_name} ({person.total_faces} faces, {person.total_images} images)")
    for face in person.faces:
        box = face.face_location
        print(f"  face {face.face_id}  image {face.image_id}  "
              f"[{box.top},{box.right},{box.bottom},{box.left}]")
    return 0


async def show_image(client: GalleryApiClient, image_id: str) -> int:
    view = ImageDetailView(client, image_id)
    await view.refresh()
    if view.detail is None:
        PrintNotifier().error(view.error or "Failed to fetch image details")
        return 1
    image = view.detail
    print(f"{image.filename} ({image.total_faces} faces)")
    for face in image.faces:
        box = face.face_location
        print(f"  face {face.face_id}  person {face.person.person_id} {face.person.person_name}  "
              f"[{box.top},{box.right},{box.bottom},{box.left}]")
    return 0


async def move_face(
    client: GalleryApiClient,
    face_id: str,
    target_person_id: Optional[str],
    new_name: Optional[str],
    new_person: bool,
) -> int:
    controller = FaceMoveController(client, PrintNavigator(), PrintNotifier())
    await controller.open(face_id)
    if new_person:
        result = await controller.move_to_new(new_name)
    else:
        result = await controller.move_to_existing(target_person_id)
    return 0 if result.kind == "success" else 1


async def delete_face(client: GalleryApiClient, face_id: str) -> int:
    controller = FaceDeleteController(client, PrintNavigator(), PrintNotifier())
    controller.request(face_id)
    result = await controller.confirm()
    return 0 if result.kind == "success" else 1


async def rename_person(client: GalleryApiClient, person_id: str, name: str) -> int:
    view = PersonDetailView(client, person_id)
    return 0 if await view.rename(name, PrintNotifier()) else 1


async def main(args: argparse.Namespace, client: Optional[GalleryApiClient] = None) -> int:
    """Main entry point."""
    client = client or GalleryApiClient(args.api_url)

    if args.command == "persons":
        return await list_persons(client)
    if args.command == "show":
        return await show_person(client, args.person_id)
    if args.command == "image":
        return await show_image(client, args.image_id)
    if args.command == "move":
        if args.to is None and not args.new:
            PrintNotifier().error("Pass --to PERSON_ID or --new")
            return 2
        return await move_face(client, args.face_id, args.to, args.name, args.new)
    if args.command == "delete":
        return await delete_face(client, args.face_id)
    if args.command == "rename":
        return await rename_person(client, args.person_id, args.name)
    return 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage persons and faces of the face gallery")
    parser.add_argument("--api-url", default=settings.API_BASE_URL, help="Face gallery API URL")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("persons", help="List persons")

    show = sub.add_parser("show", help="Show a person's faces")
    show.add_argument("person_id")

    image = sub.add_parser("image", help="Show an image's faces and their owners")
    image.add_argument("image_id")

    move = sub.add_parser("move", help="Move a face to another person")
    move.add_argument("face_id")
    target = move.add_mutually_exclusive_group()
    target.add_argument("--to", help="ID of an existing person")
    target.add_argument("--new", action="store_true", help="Move to a new person")
    move.add_argument("--name", help="Name for the new person (with --new)")

    delete = sub.add_parser("delete", help="Delete a face")
    delete.add_argument("face_id")

    rename = sub.add_parser("rename", help="Rename a person")
    rename.add_argument("person_id")
    rename.add_argument("name")

    return parser


def run(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging()
    sys.exit(asyncio.run(main(args)))


if __name__ == "__main__":
    run()
