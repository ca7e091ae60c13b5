"""Image API endpoints."""
from fastapi import APIRouter, Depends

from facegallery.api.models.common import ErrorResponse
from facegallery.api.models.images import (
    ImageDetailResponse,
    RegisterImageRequest,
    RegisterImageResponse,
)
from facegallery.infrastructure.dependencies import (
    get_detection_import_service,
    get_gallery_service,
)
from facegallery.services.detection_import import DetectionImportService
from facegallery.services.gallery import GalleryService

router = APIRouter(
    responses={
        404: {"model": ErrorResponse, "description": "Image or person not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    }
)


@router.post(
    "",
    response_model=RegisterImageResponse,
    status_code=201,
    summary="Register an image and its detected faces",
    description=(
        "Used by the detection engine. Faces without a `person_id` each get a new "
        "placeholder person."
    ),
)
async def register_image(
    request: RegisterImageRequest,
    service: DetectionImportService = Depends(get_detection_import_service),
) -> RegisterImageResponse:
    result = await service.register_image(
        filename=request.filename,
        mime_type=request.mime_type,
        faces=request.faces,
    )
    return RegisterImageResponse.from_service_response(result)


@router.get(
    "/{image_id}",
    response_model=ImageDetailResponse,
    summary="Get an image with its faces and their owners",
)
async def get_image(
    image_id: str,
    service: GalleryService = Depends(get_gallery_service),
) -> ImageDetailResponse:
    image = await service.get_image(image_id)
    return ImageDetailResponse.from_service_response(image)
