"""Wire models common to every endpoint."""
from typing import Literal

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body returned by every failed request."""
    status: Literal["error"] = "error"
    message: str = Field(..., description="Operator-facing description of the failure")
