"""API person models."""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from facegallery.domain.entities.face import FaceGeometry
from facegallery.services.models import (
    ServicePersonDetail,
    ServicePersonSummary,
    ServiceRenameResult,
)


class PersonSummary(BaseModel):
    """Person entry of the persons list and move-target picker."""
    person_id: str
    person_name: str
    total_faces: int
    total_images: int
    thumbnail: Optional[str] = None


class PersonListResponse(BaseModel):
    """Response model for listing persons."""
    status: Literal["success"] = "success"
    persons: List[PersonSummary]
    total: int
    message: str = ""

    @classmethod
    def from_service_response(cls, persons: List[ServicePersonSummary]) -> "PersonListResponse":
        return cls(
            persons=[PersonSummary(**person.model_dump()) for person in persons],
            total=len(persons),
            message=f"Found {len(persons)} persons",
        )


class PersonFace(BaseModel):
    """Face owned by a person."""
    face_id: str
    image_id: str
    cropped_face_filename: Optional[str] = None
    face_location: FaceGeometry
    manually_assigned: bool = False


class PersonImage(BaseModel):
    """Image containing at least one of a person's faces."""
    image_id: str
    filename: str
    mime_type: str


class PersonDetailResponse(BaseModel):
    """Response model for a single person."""
    status: Literal["success"] = "success"
    person_id: str
    person_name: str
    total_faces: int
    total_images: int
    faces: List[PersonFace]
    images: List[PersonImage]

    @classmethod
    def from_service_response(cls, person: ServicePersonDetail) -> "PersonDetailResponse":
        return cls(
            person_id=person.person_id,
            person_name=person.person_name,
            total_faces=person.total_faces,
            total_images=person.total_images,
            faces=[
                PersonFace(
                    face_id=face.face_id,
                    image_id=face.image_id,
                    cropped_face_filename=face.cropped_face_filename,
                    face_location=face.face_location,
                    manually_assigned=face.manually_assigned,
                )
                for face in person.faces
            ],
            images=[
                PersonImage(image_id=image.image_id, filename=image.filename, mime_type=image.mime_type)
                for image in person.images
            ],
        )


class RenamePersonRequest(BaseModel):
    """Request model for renaming a person."""
    name: str = Field(..., description="New display name")


class RenamePersonResponse(BaseModel):
    """Response model for renaming a person."""
    status: Literal["success"] = "success"
    message: str
    person_id: str
    old_name: str
    new_name: str

    @classmethod
    def from_service_response(cls, result: ServiceRenameResult) -> "RenamePersonResponse":
        return cls(
            message=f'Person renamed from "{result.old_name}" to "{result.new_name}".',
            person_id=result.person_id,
            old_name=result.old_name,
            new_name=result.new_name,
        )
