"""FastAPI dependency providers."""
from typing import AsyncGenerator

from fastapi import Depends

from facegallery.core.container import ServiceContainer, container
from facegallery.infrastructure.database.dependencies import get_uow
from facegallery.infrastructure.database.unit_of_work import UnitOfWork
from facegallery.services.clustering import ClusteringEngineClient
from facegallery.services.detection_import import DetectionImportService
from facegallery.services.face_reassignment import FaceReassignmentService
from facegallery.services.gallery import GalleryService


async def get_container() -> ServiceContainer:
    """Dependency provider for the global ServiceContainer instance."""
    return container


async def get_face_reassignment_service(
    uow: UnitOfWork = Depends(get_uow),
    cont: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[FaceReassignmentService, None]:
    """Provide the face reassignment service.

    Args:
        uow: Request-scoped unit of work
        cont: Container holding the shared face and person locks

    Yields:
        FaceReassignmentService: Service bound to this request
    """
    yield FaceReassignmentService(uow=uow, locks=cont.face_locks)


async def get_gallery_service(
    uow: UnitOfWork = Depends(get_uow),
) -> AsyncGenerator[GalleryService, None]:
    """Provide the gallery service."""
    yield GalleryService(uow=uow)


async def get_detection_import_service(
    uow: UnitOfWork = Depends(get_uow),
    cont: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[DetectionImportService, None]:
    """Provide the detection import service."""
    yield DetectionImportService(uow=uow, locks=cont.face_locks)


async def get_clustering_client(
    cont: ServiceContainer = Depends(get_container),
) -> ClusteringEngineClient:
    """Provide the shared clustering engine client."""
    return cont.clustering
