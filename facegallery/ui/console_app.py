#!/usr/bin/env python
"""
Face Gallery Streamlit Console

An operator console for the face gallery service:
1. Browse persons and their faces
2. Rename persons
3. Move misclassified faces to another person or split them into a new one
4. Delete faces
5. Review an image with every face and its owner
6. View statistics, re-run clustering and reset all data

Usage:
    streamlit run facegallery/ui/console_app.py
"""
import asyncio

import streamlit as st

from facegallery.client import (
    FaceDeleteController,
    FaceMoveController,
    GalleryApiClient,
    ImageDetailView,
    InFlightFaces,
    PersonDetailView,
)
from facegallery.core.config import settings


@st.cache_resource
def get_client() -> GalleryApiClient:
    """Get the API client."""
    return GalleryApiClient(settings.API_BASE_URL)


class SessionNavigator:
    """Navigator that switches the page stored in the Streamlit session."""

    def show_person(self, person_id: str) -> None:
        st.session_state.page = "person"
        st.session_state.person_id = person_id

    def show_persons(self) -> None:
        st.session_state.page = "persons"
        st.session_state.person_id = None

    def show_image(self, image_id: str) -> None:
        st.session_state.page = "image"
        st.session_state.image_id = image_id


class SessionNotifier:
    """Notifier that queues messages to show after the next rerun."""

    def success(self, message: str) -> None:
        st.session_state.notices.append(("success", message))

    def error(self, message: str) -> None:
        st.session_state.notices.append(("error", message))


def init_state() -> None:
    """Create the per-session controllers once."""
    if "page" in st.session_state:
        return
    st.session_state.page = "persons"
    st.session_state.person_id = None
    st.session_state.image_id = None
    st.session_state.notices = []

    client = get_client()
    in_flight = InFlightFaces()
    st.session_state.move = FaceMoveController(
        client, SessionNavigator(), SessionNotifier(), in_flight=in_flight
    )
    st.session_state.delete = FaceDeleteController(
        client, SessionNavigator(), SessionNotifier(), in_flight=in_flight
    )


def show_notices() -> None:
    for kind, message in st.session_state.notices:
        if kind == "success":
            st.success(message)
        else:
            st.error(message)
    st.session_state.notices = []


def render_persons() -> None:
    st.header("Persons")
    result = asyncio.run(get_client().list_persons())
    if result.kind == "error":
        st.error(result.reason)
        return

    search = st.text_input("Search persons", "")
    persons = [
        p for p in result.value.persons
        if search.strip().lower() in p.person_name.lower()
    ]
    st.caption(f"{len(persons)} of {result.value.total} persons")

    for person in persons:
        col1, col2, col3 = st.columns([4, 2, 1])
        col1.write(f"**{person.person_name}**")
        col2.write(f"{person.total_faces} faces · {person.total_images} images")
        if col3.button("Open", key=f"open-{person.person_id}"):
            SessionNavigator().show_person(person.person_id)
            st.rerun()


def render_person() -> None:
    view = PersonDetailView(get_client(), st.session_state.person_id)
    asyncio.run(view.refresh())

    if st.button("← All persons"):
        SessionNavigator().show_persons()
        st.rerun()

    if view.detail is None:
        st.error(view.error or "Failed to fetch person details")
        return

    person = view.detail
    st.header(person.person_name)
    st.caption(f"{person.total_faces} faces in {person.total_images} images")

    with st.form("rename"):
        new_name = st.text_input("Rename person", person.person_name)
        if st.form_submit_button("Save"):
            asyncio.run(view.rename(new_name, SessionNotifier()))
            st.rerun()

    move: FaceMoveController = st.session_state.move
    delete: FaceDeleteController = st.session_state.delete
    # Views are rebuilt on every run; point the controllers at the current one
    move.on_refresh = view.refresh
    delete.on_refresh = view.refresh

    columns = st.columns(4)
    for i, face in enumerate(person.faces):
        with columns[i % 4]:
            st.write(face.cropped_face_filename or face.face_id[:8])
            busy = face.face_id in move.in_flight
            if st.button("Move", key=f"move-{face.face_id}", disabled=busy):
                asyncio.run(move.open(face.face_id, source_person_id=person.person_id))
                st.rerun()
            if st.button("Delete", key=f"delete-{face.face_id}", disabled=busy):
                delete.request(face.face_id, owner_person_id=person.person_id)
                st.rerun()
            if st.button("Open image", key=f"image-{face.face_id}"):
                SessionNavigator().show_image(face.image_id)
                st.rerun()

    if move.dialog_open:
        render_move_dialog(move)
    if delete.confirm_open:
        render_delete_dialog(delete, person.total_faces, person.person_name)


def render_image() -> None:
    view = ImageDetailView(get_client(), st.session_state.image_id)
    asyncio.run(view.refresh())

    if st.button("← All persons"):
        SessionNavigator().show_persons()
        st.rerun()

    if view.detail is None:
        st.error(view.error or "Failed to fetch image details")
        return

    image = view.detail
    st.header(image.filename)
    st.caption(f"{image.total_faces} faces")

    move: FaceMoveController = st.session_state.move
    move.on_refresh = view.refresh

    for face in image.faces:
        box = face.face_location
        col1, col2, col3, col4 = st.columns([3, 3, 1, 1])
        col1.write(face.cropped_face_filename or face.face_id[:8])
        col2.write(f"**{face.person.person_name}** [{box.top},{box.right},{box.bottom},{box.left}]")
        busy = face.face_id in move.in_flight
        if col3.button("Move", key=f"move-{face.face_id}", disabled=busy):
            asyncio.run(move.open(face.face_id, source_person_id=face.person.person_id))
            st.rerun()
        if col4.button("Person", key=f"owner-{face.face_id}"):
            SessionNavigator().show_person(face.person.person_id)
            st.rerun()

    if move.dialog_open:
        render_move_dialog(move)


def render_move_dialog(move: FaceMoveController) -> None:
    st.subheader("Move Face")
    st.write("Move this face to an existing person or create a new person.")
    if move.last_error:
        st.error(move.last_error)

    query = st.text_input("Search persons...", "", key="move-search")
    candidates = move.candidates(query)
    if not candidates:
        st.info("No matching persons found" if query else "No other persons available")
    for person in candidates:
        if st.button(person.person_name, key=f"target-{person.person_id}", disabled=move.in_progress):
            asyncio.run(move.move_to_existing(person.person_id))
            st.rerun()

    custom_name = st.text_input("Enter person name (optional)", "", key="move-new-name")
    if st.button("Create New Person", disabled=move.in_progress):
        asyncio.run(move.move_to_new(custom_name))
        st.rerun()

    if st.button("Cancel", key="move-cancel", disabled=move.in_progress):
        move.cancel()
        st.rerun()


def render_delete_dialog(delete: FaceDeleteController, total_faces: int, person_name: str) -> None:
    st.subheader("Delete Face")
    st.write("Are you sure you want to delete this face? This action cannot be undone.")
    if total_faces == 1:
        st.warning(f'This is the last face, so this will also delete the person "{person_name}".')
    col1, col2 = st.columns(2)
    if col1.button("Delete Face", type="primary", disabled=delete.in_progress):
        asyncio.run(delete.confirm())
        st.rerun()
    if col2.button("Cancel", key="delete-cancel", disabled=delete.in_progress):
        delete.cancel()
        st.rerun()


def render_admin() -> None:
    st.header("Statistics")
    client = get_client()
    result = asyncio.run(client.get_stats())
    if result.kind == "error":
        st.error(result.reason)
    else:
        data = result.value.data
        col1, col2, col3 = st.columns(3)
        col1.metric("Persons", data.total_persons)
        col2.metric("Images", data.total_images)
        col3.metric("Faces", data.total_faces)
        st.write(
            f"Face coverage: {data.gallery_stats.face_coverage}% · "
            f"Manual assignments: {data.manual_face_assignments} · "
            f"Avg faces per person: {data.gallery_stats.avg_faces_per_person}"
        )

    st.header("Face Clustering")
    st.write("Re-run the face clustering algorithm to group similar faces.")
    if st.button("Run Face Clustering"):
        with st.spinner("Clustering faces..."):
            run = asyncio.run(client.cluster())
        notifier = SessionNotifier()
        if run.kind == "success":
            notifier.success(
                f"Clustering completed successfully: {run.value.unique_persons} persons"
            )
        else:
            notifier.error(f"Error during clustering: {run.reason}")
        st.rerun()

    st.header("Danger zone")
    st.write("Permanently delete ALL data including persons, images and faces.")
    confirmed = st.checkbox("Are you absolutely sure? This will delete everything!")
    if st.button("Yes, Delete Everything", disabled=not confirmed):
        reset = asyncio.run(client.reset())
        notifier = SessionNotifier()
        if reset.kind == "success":
            notifier.success(reset.value.message)
        else:
            notifier.error(reset.reason)
        st.rerun()


def main() -> None:
    st.set_page_config(page_title="Face Gallery Console", layout="wide")
    init_state()

    st.sidebar.title("Face Gallery")
    st.sidebar.caption(settings.API_BASE_URL)
    if st.sidebar.button("Persons"):
        SessionNavigator().show_persons()
    if st.sidebar.button("Admin"):
        st.session_state.page = "admin"

    show_notices()

    if st.session_state.page == "person" and st.session_state.person_id:
        render_person()
    elif st.session_state.page == "image" and st.session_state.image_id:
        render_image()
    elif st.session_state.page == "admin":
        render_admin()
    else:
        render_persons()


if __name__ == "__main__":
    main()
