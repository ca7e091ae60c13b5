"""Service container for dependency injection."""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from facegallery.core.config import settings
from facegallery.infrastructure.database.session import create_tables, engine
from facegallery.services.clustering import ClusteringEngineClient
from facegallery.services.face_locks import FaceLockRegistry


class ServiceContainer:
    """Container for process-wide application collaborators.

    Request-scoped services (reassignment, gallery, import) are built per
    request around a fresh unit of work; this container only holds what must
    be shared between requests.

    Example:
        ```python
        container = ServiceContainer()
        await container.initialize()

        locks = container.face_locks
        ```
    """

    def __init__(self) -> None:
        """Initialize container."""
        self.face_locks: FaceLockRegistry = FaceLockRegistry()
        self.clustering: ClusteringEngineClient = ClusteringEngineClient(
            settings.CLUSTERING_ENGINE_URL, settings.CLUSTERING_TIMEOUT
        )
        self.engine: Optional[AsyncEngine] = None

    async def initialize(self, bind: Optional[AsyncEngine] = None) -> None:
        """Bind the database engine and make sure the schema exists."""
        self.engine = bind or engine
        await create_tables(self.engine)

    async def cleanup(self) -> None:
        """Release the database engine."""
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None


# Global container instance
container = ServiceContainer()
