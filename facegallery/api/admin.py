"""Statistics and maintenance endpoints."""
from fastapi import APIRouter, Depends

from facegallery.api.models.admin import ClusterResponse, ResetResponse, StatsResponse
from facegallery.infrastructure.dependencies import get_clustering_client, get_gallery_service
from facegallery.services.clustering import ClusteringEngineClient
from facegallery.services.gallery import GalleryService

router = APIRouter()


@router.get("/stats", response_model=StatsResponse, summary="Gallery statistics")
async def get_stats(
    service: GalleryService = Depends(get_gallery_service),
) -> StatsResponse:
    stats = await service.stats()
    return StatsResponse.from_service_response(stats)


@router.delete("/reset", response_model=ResetResponse, summary="Delete all gallery data")
async def reset_gallery(
    service: GalleryService = Depends(get_gallery_service),
) -> ResetResponse:
    """Delete every face, person and image. Cannot be undone."""
    await service.reset()
    return ResetResponse(message="All persons, images and faces were deleted")


@router.get("/cluster", response_model=ClusterResponse, summary="Re-run face clustering")
async def cluster_faces(
    clustering: ClusteringEngineClient = Depends(get_clustering_client),
) -> ClusterResponse:
    """Ask the clustering engine to regroup every stored face."""
    run = await clustering.cluster()
    return ClusterResponse.from_service_response(run)
