"""Client for triggering a run of the external clustering engine."""
from typing import Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from facegallery.core.exceptions import ClusteringEngineError, ClusteringNotConfiguredError
from facegallery.core.logging import get_logger
from facegallery.services.models import ServiceClusterRun

logger = get_logger(__name__)


class ClusteringEngineClient:
    """Forwards re-clustering requests to the clustering engine.

    The engine owns detection, embeddings and clustering. It reports new
    groupings back through image registration, so this client only starts a
    run and relays the engine's summary.
    """

    def __init__(
        self,
        base_url: Optional[str],
        timeout: float,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    async def cluster(self) -> ServiceClusterRun:
        """Run clustering over every stored face.

        Returns:
            ServiceClusterRun with the engine's summary

        Raises:
            ClusteringNotConfiguredError: If no engine URL is configured
            ClusteringEngineError: If the engine is unreachable or the run failed
        """
        if not self.base_url:
            raise ClusteringNotConfiguredError("Clustering engine is not configured")

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as http:
                response = await http.get("/cluster")
        except httpx.HTTPError as e:
            raise ClusteringEngineError(
                "Clustering engine is unreachable", details={"error": str(e)}
            ) from e

        if response.is_error:
            raise ClusteringEngineError(
                f"Clustering engine error: {response.status_code}",
                details={"body": response.text[:500]},
            )

        try:
            run = ServiceClusterRun.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            raise ClusteringEngineError(
                "Clustering engine returned an unexpected response", details={"error": str(e)}
            ) from e

        logger.info(
            "Clustering run completed",
            faces_clustered=len(run.clusters),
            unique_persons=run.unique_persons,
        )
        return run
