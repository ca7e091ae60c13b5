"""Service-specific read models.

This module contains models returned by services that are independent of the API layer.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from facegallery.domain.entities.face import FaceGeometry
from facegallery.infrastructure.database.models import Face


class ServicePersonSummary(BaseModel):
    """Person with derived membership counts."""
    person_id: str = Field(..., description="Person identifier")
    person_name: str = Field(..., description="Display name")
    total_faces: int = Field(..., description="Number of faces owned", ge=0)
    total_images: int = Field(..., description="Number of distinct images with an owned face", ge=0)
    thumbnail: Optional[str] = Field(None, description="Cropped face used as the person's thumbnail")


class ServiceFace(BaseModel):
    """Face as shown inside a person or image view."""
    face_id: str = Field(..., description="Face identifier")
    image_id: str = Field(..., description="Image the face was detected in")
    person_id: str = Field(..., description="Owning person")
    cropped_face_filename: Optional[str] = Field(None, description="Cropped thumbnail reference")
    face_location: FaceGeometry = Field(..., description="Bounding box in source-image pixels")
    manually_assigned: bool = Field(False, description="Whether an operator has moved this face")

    @classmethod
    def from_model(cls, face: Face) -> "ServiceFace":
        """Create a service face from a database row."""
        return cls(
            face_id=face.id,
            image_id=face.image_id,
            person_id=face.person_id,
            cropped_face_filename=face.cropped_face_filename,
            face_location=FaceGeometry(
                top=face.bbox_top,
                right=face.bbox_right,
                bottom=face.bbox_bottom,
                left=face.bbox_left,
            ),
            manually_assigned=face.manually_assigned,
        )


class ServiceImage(BaseModel):
    """Image metadata."""
    image_id: str
    filename: str
    mime_type: str
    uploaded_at: Optional[datetime] = None


class ServicePersonDetail(BaseModel):
    """A person with every face it owns and the images they come from."""
    person_id: str
    person_name: str
    total_faces: int
    total_images: int
    faces: List[ServiceFace]
    images: List[ServiceImage]


class ServiceImageFace(ServiceFace):
    """Face inside an image view, carrying its owner's name."""
    person_name: str = Field(..., description="Owning person's display name")


class ServiceImageDetail(BaseModel):
    """An image with every face detected in it."""
    image_id: str
    filename: str
    mime_type: str
    total_faces: int
    faces: List[ServiceImageFace]


class ServiceRenameResult(BaseModel):
    """Outcome of renaming a person."""
    person_id: str
    old_name: str
    new_name: str


class ServiceGalleryStats(BaseModel):
    """Aggregate counts over the whole store."""
    total_persons: int
    total_images: int
    total_faces: int
    images_with_faces: int
    images_without_faces: int
    manual_face_assignments: int
    face_coverage: float = Field(..., description="Percentage of images with at least one face")
    avg_faces_per_image: float
    avg_faces_per_person: float


class ServiceRegisteredImage(BaseModel):
    """Outcome of registering an image and its detections."""
    image_id: str
    faces_detected: int
    face_ids: List[str]
    persons_created: List[str] = Field(..., description="IDs of placeholder persons created for unassigned faces")


class ServiceClusterRun(BaseModel):
    """Outcome of a re-clustering run reported by the clustering engine."""
    message: str = ""
    clusters: List[int] = Field(default_factory=list, description="Cluster label per face")
    unique_persons: int = 0
