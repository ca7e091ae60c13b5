"""Value objects package."""
from .reassignment import FaceDeleteResult, FaceMoveResult, NewPersonMoveResult

__all__ = ["FaceDeleteResult", "FaceMoveResult", "NewPersonMoveResult"]
