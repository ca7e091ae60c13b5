"""Person API endpoints."""
from fastapi import APIRouter, Depends

from facegallery.api.models.common import ErrorResponse
from facegallery.api.models.persons import (
    PersonDetailResponse,
    PersonListResponse,
    RenamePersonRequest,
    RenamePersonResponse,
)
from facegallery.core.logging import get_logger
from facegallery.infrastructure.dependencies import get_gallery_service
from facegallery.services.gallery import GalleryService

logger = get_logger(__name__)
router = APIRouter(
    responses={
        404: {"model": ErrorResponse, "description": "Person not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    }
)


@router.get(
    "",
    response_model=PersonListResponse,
    summary="List persons",
)
async def list_persons(
    service: GalleryService = Depends(get_gallery_service),
) -> PersonListResponse:
    """List every person with face and image counts."""
    persons = await service.list_persons()
    return PersonListResponse.from_service_response(persons)


@router.get(
    "/{person_id}",
    response_model=PersonDetailResponse,
    summary="Get a person with their faces and images",
)
async def get_person(
    person_id: str,
    service: GalleryService = Depends(get_gallery_service),
) -> PersonDetailResponse:
    person = await service.get_person(person_id)
    return PersonDetailResponse.from_service_response(person)


@router.put(
    "/{person_id}/rename",
    response_model=RenamePersonResponse,
    summary="Rename a person",
    responses={400: {"model": ErrorResponse, "description": "Blank or too long name"}},
)
async def rename_person(
    person_id: str,
    request: RenamePersonRequest,
    service: GalleryService = Depends(get_gallery_service),
) -> RenamePersonResponse:
    """Rename a person. Face membership is not affected."""
    result = await service.rename_person(person_id, request.name)
    return RenamePersonResponse.from_service_response(result)
