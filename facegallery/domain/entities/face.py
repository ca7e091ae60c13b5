"""Core face domain entities."""
from pydantic import BaseModel, Field, model_validator


class FaceGeometry(BaseModel):
    """Face bounding box in source-image pixel space."""
    top: int = Field(..., ge=0, description="Top edge of the bounding box")
    right: int = Field(..., ge=0, description="Right edge of the bounding box")
    bottom: int = Field(..., ge=0, description="Bottom edge of the bounding box")
    left: int = Field(..., ge=0, description="Left edge of the bounding box")

    @model_validator(mode="after")
    def check_edges(self) -> "FaceGeometry":
        """Reject boxes whose edges are inverted."""
        if self.right < self.left or self.bottom < self.top:
            raise ValueError("Bounding box edges are inverted")
        return self

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top
