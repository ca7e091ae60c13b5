"""Tagged results returned by every console client operation."""
from typing import Generic, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, Field
from typing_extensions import TypeAliasType

ResponseT = TypeVar("ResponseT")


class OperationSuccess(BaseModel, Generic[ResponseT]):
    """The server confirmed the operation."""
    kind: Literal["success"] = "success"
    value: ResponseT


class OperationError(BaseModel):
    """The operation failed, was rejected, or its outcome is unknown.

    Transport failures (``transport=True``) do not mean the server did not
    apply the change; only that no answer arrived.
    """
    kind: Literal["error"] = "error"
    reason: str = Field(..., description="Most specific operator-facing message available")
    status_code: Optional[int] = Field(None, description="HTTP status, if a response arrived")
    transport: bool = Field(False, description="Whether the request never got a response")

    @property
    def is_conflict(self) -> bool:
        return self.status_code == 409

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


# Generic alias; use as OperationResult[MoveFaceResponse]
OperationResult = TypeAliasType(
    "OperationResult",
    Union[OperationSuccess[ResponseT], OperationError],
    type_params=(ResponseT,),
)
