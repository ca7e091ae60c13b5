"""API face reassignment models."""
from typing import Literal, Optional

from pydantic import BaseModel, Field

from facegallery.domain.value_objects.reassignment import (
    FaceDeleteResult,
    FaceMoveResult,
    NewPersonMoveResult,
)


class MoveFaceRequest(BaseModel):
    """Request model for moving a face to an existing person."""
    target_person_id: str = Field(..., min_length=1, description="Person that should own the face")
    expected_person_id: Optional[str] = Field(
        None, description="Owner the caller believes the face currently has"
    )


class MoveFaceToNewPersonRequest(BaseModel):
    """Request model for moving a face to a new person."""
    custom_name: Optional[str] = Field(
        None, description="Name for the new person; blank means a placeholder is generated"
    )
    expected_person_id: Optional[str] = Field(
        None, description="Owner the caller believes the face currently has"
    )


def _with_cleanup(message: str, deleted: Optional[str]) -> str:
    if deleted:
        return f'{message} Empty person "{deleted}" was automatically deleted.'
    return message


class MoveFaceResponse(BaseModel):
    """Response model for moving a face to an existing person."""
    status: Literal["success"] = "success"
    message: str
    face_id: str
    from_person: str = Field(..., description="Previous owner name")
    to_person: str = Field(..., description="New owner name")
    target_person_id: str
    deleted_empty_person: Optional[str] = Field(
        None, description="Previous owner name, present only if it was removed"
    )

    @classmethod
    def from_service_response(cls, result: FaceMoveResult) -> "MoveFaceResponse":
        """Convert the service result to the API response model."""
        if result.is_noop:
            message = f'Face already belongs to "{result.to_person}".'
        else:
            message = f'Face moved from "{result.from_person}" to "{result.to_person}".'
        return cls(
            message=_with_cleanup(message, result.deleted_empty_person),
            face_id=result.face_id,
            from_person=result.from_person,
            to_person=result.to_person,
            target_person_id=result.target_person_id,
            deleted_empty_person=result.deleted_empty_person,
        )


class MoveFaceToNewPersonResponse(BaseModel):
    """Response model for moving a face to a new person."""
    status: Literal["success"] = "success"
    message: str
    face_id: str
    from_person: str
    new_person_id: str
    new_person_name: str
    deleted_empty_person: Optional[str] = None

    @classmethod
    def from_service_response(cls, result: NewPersonMoveResult) -> "MoveFaceToNewPersonResponse":
        """Convert the service result to the API response model."""
        message = f'Face moved from "{result.from_person}" to new person "{result.new_person_name}".'
        return cls(
            message=_with_cleanup(message, result.deleted_empty_person),
            face_id=result.face_id,
            from_person=result.from_person,
            new_person_id=result.new_person_id,
            new_person_name=result.new_person_name,
            deleted_empty_person=result.deleted_empty_person,
        )


class DeleteFaceResponse(BaseModel):
    """Response model for deleting a face."""
    status: Literal["success"] = "success"
    message: str
    face_id: str
    from_person: str
    deleted_empty_person: Optional[str] = None

    @classmethod
    def from_service_response(cls, result: FaceDeleteResult) -> "DeleteFaceResponse":
        """Convert the service result to the API response model."""
        message = f'Face deleted from "{result.from_person}".'
        return cls(
            message=_with_cleanup(message, result.deleted_empty_person),
            face_id=result.face_id,
            from_person=result.from_person,
            deleted_empty_person=result.deleted_empty_person,
        )
