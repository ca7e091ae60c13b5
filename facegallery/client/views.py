"""Detail views that always show the server's current state."""
from typing import Optional

from facegallery.api.models.images import ImageDetailResponse
from facegallery.api.models.persons import PersonDetailResponse
from facegallery.client.api_client import GalleryApiClient
from facegallery.client.controller import Notifier
from facegallery.client.results import OperationResult


class PersonDetailView:
    """A person's page. Each refresh replaces the whole detail with a fresh copy."""

    def __init__(self, client: GalleryApiClient, person_id: str) -> None:
        self.client = client
        self.person_id = person_id
        self.detail: Optional[PersonDetailResponse] = None
        self.error: Optional[str] = None

    @property
    def missing(self) -> bool:
        """Whether the person no longer exists (e.g. its last face was moved away)."""
        return self.detail is None and self.error is not None

    async def refresh(self) -> None:
        result = await self.client.get_person(self.person_id)
        if result.kind == "success":
            self.detail = result.value
            self.error = None
        else:
            self.detail = None
            self.error = result.reason

    async def rename(self, name: str, notifier: Notifier) -> bool:
        """Rename the person, then reload it from the server."""
        if not name.strip():
            notifier.error("Person name cannot be empty")
            return False
        result = await self.client.rename_person(self.person_id, name)
        if result.kind == "success":
            notifier.success(result.value.message)
            await self.refresh()
            return True
        notifier.error(result.reason)
        return False


class ImageDetailView:
    """An image's page with every face and its current owner."""

    def __init__(self, client: GalleryApiClient, image_id: str) -> None:
        self.client = client
        self.image_id = image_id
        self.detail: Optional[ImageDetailResponse] = None
        self.error: Optional[str] = None

    async def refresh(self) -> None:
        result: OperationResult[ImageDetailResponse] = await self.client.get_image(self.image_id)
        if result.kind == "success":
            self.detail = result.value
            self.error = None
        else:
            self.detail = None
            self.error = result.reason
