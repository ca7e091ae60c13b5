"""Console client: HTTP API client, reassignment controllers and detail views."""
from .api_client import GalleryApiClient
from .controller import (
    DeletePhase,
    FaceDeleteController,
    FaceMoveController,
    InFlightFaces,
    MovePhase,
    Navigator,
    Notifier,
)
from .results import OperationError, OperationResult, OperationSuccess
from .views import ImageDetailView, PersonDetailView

__all__ = [
    "DeletePhase",
    "FaceDeleteController",
    "FaceMoveController",
    "GalleryApiClient",
    "ImageDetailView",
    "InFlightFaces",
    "MovePhase",
    "Navigator",
    "Notifier",
    "OperationError",
    "OperationResult",
    "OperationSuccess",
    "PersonDetailView",
]
