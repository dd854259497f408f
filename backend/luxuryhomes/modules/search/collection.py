"""
Property collection interface and backend factory.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
import logging

from luxuryhomes.core.config import settings
from luxuryhomes.models.property import Property, PropertyCreate
from luxuryhomes.models.search import CompiledQuery

logger = logging.getLogger(__name__)


class PropertyCollection(ABC):
    """The remote store of record for listings.

    Implementations raise QueryFailure when a read cannot be answered and
    ListingSubmissionFailure when a write is rejected.
    """

    async def initialize(self) -> None:
        """Prepare the backend (indices, connections)"""

    async def finalize(self) -> None:
        """Release backend resources"""

    @abstractmethod
    async def search(self, query: CompiledQuery) -> List[Property]:
        ...

    @abstractmethod
    async def get(self, property_id: str) -> Optional[Property]:
        ...

    @abstractmethod
    async def create(self, listing: PropertyCreate) -> Property:
        ...

    async def health_check(self) -> bool:
        return True


def create_property_collection(backend_type: Optional[str] = None) -> PropertyCollection:
    """
    Build the configured property collection.

    Args:
        backend_type: "elasticsearch" or "memory"; defaults to settings.PROPERTY_BACKEND

    Raises:
        ValueError: Unknown backend type
    """
    backend = backend_type or settings.PROPERTY_BACKEND

    if backend == "elasticsearch":
        from luxuryhomes.modules.search.elasticsearch_service import ElasticsearchPropertyCollection
        logger.info("Creating Elasticsearch property collection")
        return ElasticsearchPropertyCollection()

    if backend == "memory":
        from luxuryhomes.modules.search.memory_collection import InMemoryPropertyCollection
        logger.info("Creating in-memory property collection")
        return InMemoryPropertyCollection()

    raise ValueError(
        f"Unknown property backend: {backend}. "
        f"Supported backends: elasticsearch, memory"
    )
