"""Face reassignment value objects.

These are transition records, not stored entities. Each one describes where a
face came from, where it went, and which person (if any) stopped existing as a
side effect of the operation.
"""
from typing import Optional

from pydantic import BaseModel, Field


class FaceMoveResult(BaseModel):
    """Result of moving a face to an existing person."""
    face_id: str = Field(..., description="Face that was moved")
    from_person_id: str = Field(..., description="Previous owner ID")
    from_person: str = Field(..., description="Previous owner name")
    target_person_id: str = Field(..., description="New owner ID")
    to_person: str = Field(..., description="New owner name")
    deleted_empty_person: Optional[str] = Field(
        None, description="Name of the previous owner if it was left empty and removed"
    )

    @property
    def is_noop(self) -> bool:
        """Whether the face already belonged to the target."""
        return self.from_person_id == self.target_person_id


class NewPersonMoveResult(BaseModel):
    """Result of moving a face to a newly created person."""
    face_id: str = Field(..., description="Face that was moved")
    from_person_id: str = Field(..., description="Previous owner ID")
    from_person: str = Field(..., description="Previous owner name")
    new_person_id: str = Field(..., description="ID of the person created for the face")
    new_person_name: str = Field(..., description="Name of the person created for the face")
    deleted_empty_person: Optional[str] = Field(
        None, description="Name of the previous owner if it was left empty and removed"
    )


class FaceDeleteResult(BaseModel):
    """Result of deleting a face."""
    face_id: str = Field(..., description="Face that was deleted")
    from_person_id: str = Field(..., description="Owner at the time of deletion")
    from_person: str = Field(..., description="Owner name at the time of deletion")
    deleted_empty_person: Optional[str] = Field(
        None, description="Name of the owner if it was left empty and removed"
    )
