"""Async HTTP client for the face gallery API."""
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from facegallery.api.models.admin import ClusterResponse, ResetResponse, StatsResponse
from facegallery.api.models.faces import (
    DeleteFaceResponse,
    MoveFaceResponse,
    MoveFaceToNewPersonResponse,
)
from facegallery.api.models.images import ImageDetailResponse
from facegallery.api.models.persons import (
    PersonDetailResponse,
    PersonListResponse,
    RenamePersonResponse,
)
from facegallery.client.results import OperationError, OperationResult, OperationSuccess
from facegallery.core.config import settings
from facegallery.core.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class GalleryApiClient:
    """Client for the face gallery HTTP API.

    Every method returns an ``OperationSuccess`` or an ``OperationError`` and
    never raises for HTTP errors, ``"status": "error"`` bodies, malformed
    bodies or network failures. A call is only a success when the transport
    succeeded *and* the body says ``"status": "success"``.

    Each call opens its own ``httpx.AsyncClient`` so one instance can be
    shared across event loops (the Streamlit console runs each action in a
    fresh loop).

    Example:
        ```python
        client = GalleryApiClient("http://localhost:8000")
        result = await client.move_face_to_person(face_id, target_id)
        if result.kind == "success":
            print(result.value.deleted_empty_person)
        ```
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root, defaults to settings.API_BASE_URL
            timeout: Per-request timeout in seconds, defaults to settings.REQUEST_TIMEOUT
            transport: Custom httpx transport (used to talk to an in-process app)
        """
        self.base_url = base_url or settings.API_BASE_URL
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self._transport = transport

    async def move_face_to_person(
        self,
        face_id: str,
        target_person_id: str,
        expected_person_id: Optional[str] = None,
    ) -> OperationResult[MoveFaceResponse]:
        body: Dict[str, Any] = {"target_person_id": target_person_id}
        if expected_person_id is not None:
            body["expected_person_id"] = expected_person_id
        return await self._request(
            "PUT", f"/faces/{face_id}/move", MoveFaceResponse,
            fallback="Failed to move face", json=body,
        )

    async def move_face_to_new_person(
        self,
        face_id: str,
        custom_name: Optional[str] = None,
        expected_person_id: Optional[str] = None,
    ) -> OperationResult[MoveFaceToNewPersonResponse]:
        """Move a face to a new person; a blank name is sent as no name."""
        body: Dict[str, Any] = {}
        name = (custom_name or "").strip()
        if name:
            body["custom_name"] = name
        if expected_person_id is not None:
            body["expected_person_id"] = expected_person_id
        return await self._request(
            "PUT", f"/faces/{face_id}/move-to-new", MoveFaceToNewPersonResponse,
            fallback="Failed to move face to new person", json=body,
        )

    async def delete_face(
        self,
        face_id: str,
        expected_person_id: Optional[str] = None,
    ) -> OperationResult[DeleteFaceResponse]:
        params = {"expected_person_id": expected_person_id} if expected_person_id else None
        return await self._request(
            "DELETE", f"/faces/{face_id}", DeleteFaceResponse,
            fallback="Failed to delete face", params=params,
        )

    async def list_persons(self) -> OperationResult[PersonListResponse]:
        return await self._request(
            "GET", "/persons", PersonListResponse, fallback="Failed to fetch persons",
        )

    async def get_person(self, person_id: str) -> OperationResult[PersonDetailResponse]:
        return await self._request(
            "GET", f"/persons/{person_id}", PersonDetailResponse,
            fallback="Failed to fetch person details",
        )

    async def rename_person(self, person_id: str, name: str) -> OperationResult[RenamePersonResponse]:
        return await self._request(
            "PUT", f"/persons/{person_id}/rename", RenamePersonResponse,
            fallback="Failed to rename person", json={"name": name.strip()},
        )

    async def get_image(self, image_id: str) -> OperationResult[ImageDetailResponse]:
        return await self._request(
            "GET", f"/images/{image_id}", ImageDetailResponse,
            fallback="Failed to fetch image details",
        )

    async def get_stats(self) -> OperationResult[StatsResponse]:
        return await self._request(
            "GET", "/stats", StatsResponse, fallback="Failed to fetch statistics",
        )

    async def cluster(self) -> OperationResult[ClusterResponse]:
        return await self._request(
            "GET", "/cluster", ClusterResponse, fallback="Failed to cluster faces",
            timeout=settings.CLUSTERING_TIMEOUT,
        )

    async def reset(self) -> OperationResult[ResetResponse]:
        return await self._request(
            "DELETE", "/reset", ResetResponse, fallback="Failed to reset database",
        )

    async def _request(
        self,
        method: str,
        path: str,
        response_model: Type[ModelT],
        fallback: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> OperationResult[ModelT]:
        """Send one request and classify the outcome.

        Args:
            method: HTTP method
            path: Path relative to the API root
            response_model: Model the success body must match
            fallback: Message used when the server gives none
            json: Optional JSON body
            params: Optional query parameters
            timeout: Overrides the client timeout for this call

        Returns:
            OperationSuccess wrapping the parsed body, or OperationError
        """
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=timeout if timeout is not None else self.timeout,
                transport=self._transport,
            ) as http:
                response = await http.request(method, path, json=json, params=params)
        except httpx.HTTPError as e:
            logger.warning("Request did not complete", method=method, path=path, error=str(e))
            return OperationError(reason=fallback, transport=True)

        body = _json_body(response)

        if response.is_error or body.get("status") != "success":
            reason = _server_message(body) or fallback
            logger.warning(
                "Request failed",
                method=method,
                path=path,
                status_code=response.status_code,
                reason=reason,
            )
            return OperationError(reason=reason, status_code=response.status_code)

        try:
            value = response_model.model_validate(body)
        except PydanticValidationError as e:
            logger.error("Unexpected response body", method=method, path=path, error=str(e))
            return OperationError(reason=fallback, status_code=response.status_code)

        return OperationSuccess(value=value)


def _json_body(response: httpx.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _server_message(body: Dict[str, Any]) -> Optional[str]:
    for key in ("message", "detail", "error"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
    return None
