"""Face reassignment API endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from facegallery.api.models.common import ErrorResponse
from facegallery.api.models.faces import (
    DeleteFaceResponse,
    MoveFaceRequest,
    MoveFaceResponse,
    MoveFaceToNewPersonRequest,
    MoveFaceToNewPersonResponse,
)
from facegallery.core.logging import get_logger
from facegallery.infrastructure.dependencies import get_face_reassignment_service
from facegallery.services.face_reassignment import FaceReassignmentService

logger = get_logger(__name__)
router = APIRouter(
    responses={
        404: {"model": ErrorResponse, "description": "Face or person not found"},
        409: {"model": ErrorResponse, "description": "Face changed owner concurrently"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    }
)


@router.put(
    "/{face_id}/move",
    response_model=MoveFaceResponse,
    response_model_exclude_none=True,
    summary="Move a face to an existing person",
    description=(
        "Reassigns the face to the target person. If the previous owner is left "
        "without faces it is deleted and named in `deleted_empty_person`."
    ),
)
async def move_face(
    face_id: str,
    request: MoveFaceRequest,
    service: FaceReassignmentService = Depends(get_face_reassignment_service),
) -> MoveFaceResponse:
    """Move a face to an existing person.

    Args:
        face_id: Face to move
        request: Target person and optional expected current owner
        service: Reassignment service provided by dependency injection

    Returns:
        MoveFaceResponse describing both owners
    """
    logger.info("Move face requested", face_id=face_id, target_person_id=request.target_person_id)
    result = await service.move_to_existing_person(
        face_id=face_id,
        target_person_id=request.target_person_id,
        expected_person_id=request.expected_person_id,
    )
    return MoveFaceResponse.from_service_response(result)


@router.put(
    "/{face_id}/move-to-new",
    response_model=MoveFaceToNewPersonResponse,
    response_model_exclude_none=True,
    summary="Move a face to a new person",
    description=(
        "Creates a new person (named `custom_name`, or a generated placeholder when "
        "blank) and moves the face to it."
    ),
)
async def move_face_to_new_person(
    face_id: str,
    request: Optional[MoveFaceToNewPersonRequest] = None,
    service: FaceReassignmentService = Depends(get_face_reassignment_service),
) -> MoveFaceToNewPersonResponse:
    """Move a face to a newly created person.

    The request body is optional; omitting it is the same as sending no name.
    """
    request = request or MoveFaceToNewPersonRequest()
    logger.info("Move face to new person requested", face_id=face_id)
    result = await service.move_to_new_person(
        face_id=face_id,
        custom_name=request.custom_name,
        expected_person_id=request.expected_person_id,
    )
    return MoveFaceToNewPersonResponse.from_service_response(result)


@router.delete(
    "/{face_id}",
    response_model=DeleteFaceResponse,
    response_model_exclude_none=True,
    summary="Delete a face",
)
async def delete_face(
    face_id: str,
    expected_person_id: Optional[str] = Query(
        None, description="Owner the caller believes the face currently has"
    ),
    service: FaceReassignmentService = Depends(get_face_reassignment_service),
) -> DeleteFaceResponse:
    """Delete a face and, if it was the last one, its owner."""
    logger.info("Delete face requested", face_id=face_id)
    result = await service.delete_face(face_id=face_id, expected_person_id=expected_person_id)
    return DeleteFaceResponse.from_service_response(result)
