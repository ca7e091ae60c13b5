"""API image models."""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from facegallery.domain.entities.face import FaceGeometry
from facegallery.services.detection_import import DetectedFace
from facegallery.services.models import ServiceImageDetail, ServiceRegisteredImage


class FaceOwner(BaseModel):
    """Person owning a face in an image view."""
    person_id: str
    person_name: str


class ImageFace(BaseModel):
    """Face detected in an image."""
    face_id: str
    cropped_face_filename: Optional[str] = None
    face_location: FaceGeometry
    person: FaceOwner


class ImageDetailResponse(BaseModel):
    """Response model for a single image."""
    status: Literal["success"] = "success"
    image_id: str
    filename: str
    mime_type: str
    total_faces: int
    faces: List[ImageFace]

    @classmethod
    def from_service_response(cls, image: ServiceImageDetail) -> "ImageDetailResponse":
        return cls(
            image_id=image.image_id,
            filename=image.filename,
            mime_type=image.mime_type,
            total_faces=image.total_faces,
            faces=[
                ImageFace(
                    face_id=face.face_id,
                    cropped_face_filename=face.cropped_face_filename,
                    face_location=face.face_location,
                    person=FaceOwner(person_id=face.person_id, person_name=face.person_name),
                )
                for face in image.faces
            ],
        )


class RegisterImageRequest(BaseModel):
    """Request model for registering an image and its detected faces."""
    filename: str = Field(..., min_length=1, max_length=512)
    mime_type: str = Field("image/jpeg", max_length=100)
    faces: List[DetectedFace] = Field(default_factory=list)


class RegisterImageResponse(BaseModel):
    """Response model for registering an image."""
    status: Literal["success"] = "success"
    message: str
    image_id: str
    faces_detected: int
    face_ids: List[str]
    persons_created: List[str]

    @classmethod
    def from_service_response(cls, result: ServiceRegisteredImage) -> "RegisterImageResponse":
        return cls(
            message=f"Registered image with {result.faces_detected} faces",
            image_id=result.image_id,
            faces_detected=result.faces_detected,
            face_ids=result.face_ids,
            persons_created=result.persons_created,
        )
