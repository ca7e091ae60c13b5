"""Shared fixtures: a throwaway SQLite gallery, the API app bound to it, and seeding helpers."""
from dataclasses import dataclass, field
from typing import AsyncGenerator, List, Optional, Set

import httpx
import pytest
from sqlalchemy import select

from facegallery.client.api_client import GalleryApiClient
from facegallery.domain.entities.face import FaceGeometry
from facegallery.infrastructure.database.dependencies import get_session
from facegallery.infrastructure.database.models import Face, Person
from facegallery.infrastructure.database.session import (
    build_engine,
    build_session_factory,
    create_tables,
)
from facegallery.infrastructure.database.unit_of_work import UnitOfWork
from facegallery.main import app
from facegallery.services.face_locks import FaceLockRegistry
from facegallery.services.face_reassignment import FaceReassignmentService
from facegallery.services.gallery import GalleryService


@dataclass
class SeededPerson:
    person_id: str
    name: str
    image_id: str
    face_ids: List[str] = field(default_factory=list)


class GallerySeeder:
    """Writes fixture data and reads back the committed state with fresh sessions."""

    def __init__(self, session_factory) -> None:
        self._session_factory = session_factory

    async def image(self, filename: str = "group.jpg") -> str:
        async with self._session_factory() as session:
            uow = UnitOfWork(session)
            async with uow.transaction():
                image = await uow.images.create(filename, "image/jpeg")
        return image.id

    async def person(self, name: str, faces: int = 1, image_id: Optional[str] = None) -> SeededPerson:
        """Create a person owning ``faces`` faces, all in one image."""
        async with self._session_factory() as session:
            uow = UnitOfWork(session)
            async with uow.transaction():
                if image_id is None:
                    image = await uow.images.create(f"{name.lower()}.jpg", "image/jpeg")
                    image_id = image.id
                person = await uow.persons.create(name)
                seeded = SeededPerson(person_id=person.id, name=name, image_id=image_id)
                for i in range(faces):
                    face = await uow.faces.create(
                        person_id=person.id,
                        image_id=image_id,
                        geometry=FaceGeometry(top=10, right=60 + 60 * i, bottom=60, left=10 + 60 * i),
                        cropped_face_filename=f"{name.lower()}_{i}.jpg",
                    )
                    seeded.face_ids.append(face.id)
        return seeded

    async def owner_of(self, face_id: str) -> Optional[str]:
        async with self._session_factory() as session:
            result = await session.execute(select(Face.person_id).where(Face.id == face_id))
            return result.scalar_one_or_none()

    async def person_names(self) -> Set[str]:
        async with self._session_factory() as session:
            result = await session.execute(select(Person.name))
            return set(result.scalars().all())

    async def person_exists(self, person_id: str) -> bool:
        async with self._session_factory() as session:
            return await session.get(Person, person_id) is not None

    async def faces_of(self, person_id: str) -> Set[str]:
        async with self._session_factory() as session:
            result = await session.execute(select(Face.id).where(Face.person_id == person_id))
            return set(result.scalars().all())

    async def empty_persons(self) -> List[str]:
        """Names of persons that own no faces. Must always be empty."""
        async with self._session_factory() as session:
            stmt = select(Person.name).where(Person.id.not_in(select(Face.person_id)))
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def orphan_faces(self) -> List[str]:
        """IDs of faces whose owner row is gone. Must always be empty."""
        async with self._session_factory() as session:
            stmt = select(Face.id).where(Face.person_id.not_in(select(Person.id)))
            result = await session.execute(stmt)
            return list(result.scalars().all())


@pytest.fixture
async def engine(tmp_path):
    """Provide an engine for a fresh SQLite database file."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'gallery.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def seeder(session_factory) -> GallerySeeder:
    return GallerySeeder(session_factory)


@pytest.fixture
async def uow(session_factory) -> AsyncGenerator[UnitOfWork, None]:
    async with session_factory() as session:
        yield UnitOfWork(session)


@pytest.fixture
def face_locks() -> FaceLockRegistry:
    return FaceLockRegistry()


@pytest.fixture
def reassignment(uow, face_locks) -> FaceReassignmentService:
    """Provide a reassignment service bound to the test database."""
    return FaceReassignmentService(uow, face_locks)


@pytest.fixture
def gallery(uow) -> GalleryService:
    return GalleryService(uow)


@pytest.fixture
def api_app(session_factory):
    """The FastAPI app with its database session pointed at the test database."""

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def http(api_app) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Raw HTTP client talking to the in-process app."""
    transport = httpx.ASGITransport(app=api_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def api_client(api_app) -> GalleryApiClient:
    """Console API client talking to the in-process app."""
    return GalleryApiClient("http://test", transport=httpx.ASGITransport(app=api_app))
