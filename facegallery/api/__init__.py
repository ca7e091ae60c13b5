"""API router initialization."""
from fastapi import APIRouter

from .admin import router as admin_router
from .faces import router as faces_router
from .images import router as images_router
from .persons import router as persons_router

router = APIRouter()

router.include_router(faces_router, prefix="/faces", tags=["faces"])
router.include_router(persons_router, prefix="/persons", tags=["persons"])
router.include_router(images_router, prefix="/images", tags=["images"])
router.include_router(admin_router, tags=["admin"])
