"""API statistics and maintenance models."""
from typing import List, Literal

from pydantic import BaseModel

from facegallery.services.models import ServiceClusterRun, ServiceGalleryStats


class FaceDistribution(BaseModel):
    face_coverage: float
    avg_faces_per_image: float
    avg_faces_per_person: float


class StatsData(BaseModel):
    total_persons: int
    total_images: int
    total_faces: int
    images_with_faces: int
    images_without_faces: int
    manual_face_assignments: int
    gallery_stats: FaceDistribution


class StatsResponse(BaseModel):
    """Response model for gallery statistics."""
    status: Literal["success"] = "success"
    data: StatsData
    message: str = ""

    @classmethod
    def from_service_response(cls, stats: ServiceGalleryStats) -> "StatsResponse":
        return cls(
            data=StatsData(
                total_persons=stats.total_persons,
                total_images=stats.total_images,
                total_faces=stats.total_faces,
                images_with_faces=stats.images_with_faces,
                images_without_faces=stats.images_without_faces,
                manual_face_assignments=stats.manual_face_assignments,
                gallery_stats=FaceDistribution(
                    face_coverage=stats.face_coverage,
                    avg_faces_per_image=stats.avg_faces_per_image,
                    avg_faces_per_person=stats.avg_faces_per_person,
                ),
            ),
            message="Statistics retrieved",
        )


class ResetResponse(BaseModel):
    """Response model for the data reset."""
    status: Literal["success"] = "success"
    message: str


class ClusterResponse(BaseModel):
    """Response model for a re-clustering run."""
    status: Literal["success"] = "success"
    message: str
    clusters: List[int]
    unique_persons: int

    @classmethod
    def from_service_response(cls, run: ServiceClusterRun) -> "ClusterResponse":
        return cls(
            message=run.message or "Clustering completed successfully",
            clusters=run.clusters,
            unique_persons=run.unique_persons,
        )
