"""Custom exceptions for the face gallery service."""
from typing import Optional


class FaceGalleryError(Exception):
    """Base exception for face gallery operations."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[dict] = None):
        """
        Initialize face gallery error.

        Args:
            message: Error description, safe to show to an operator
            details: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(FaceGalleryError):
    """Raised when a referenced entity does not exist."""
    status_code = 404


class FaceNotFoundError(NotFoundError):
    """Raised when a face ID does not refer to a stored face."""
    pass


class PersonNotFoundError(NotFoundError):
    """Raised when a person ID does not refer to a stored person."""
    pass


class ImageNotFoundError(NotFoundError):
    """Raised when an image ID does not refer to a stored image."""
    pass


class ConflictError(FaceGalleryError):
    """Raised when a face changed owner since the caller last looked at it."""
    status_code = 409


class ValidationError(FaceGalleryError):
    """Raised when request data is well-formed but not acceptable."""
    status_code = 400


class ClusteringEngineError(FaceGalleryError):
    """Raised when the external clustering engine fails or cannot be reached."""
    status_code = 502


class ClusteringNotConfiguredError(ClusteringEngineError):
    """Raised when re-clustering is requested but no engine URL is set."""
    status_code = 503
