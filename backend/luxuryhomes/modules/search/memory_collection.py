from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional
import asyncio
import uuid
import logging

from luxuryhomes.core.config import settings
from luxuryhomes.models.property import Property, PropertyCreate
from luxuryhomes.models.search import CompiledQuery
from luxuryhomes.modules.search.collection import PropertyCollection

logger = logging.getLogger(__name__)


class InMemoryPropertyCollection(PropertyCollection):
    """Property collection kept in process memory.

    Evaluates compiled clauses directly against each record, which makes it
    the reference for how a compiled query is meant to match.
    """

    def __init__(self, properties: Iterable[Property] = (), limit: Optional[int] = None):
        self._properties: Dict[str, Property] = {p.id: p for p in properties}
        self.limit = limit or settings.SEARCH_RESULT_LIMIT

    async def search(self, query: CompiledQuery) -> List[Property]:
        # Yield once so concurrent callers interleave the way they would over the network
        await asyncio.sleep(0)

        matches = [p for p in self._properties.values() if query.matches(p.to_record())]
        matches.sort(
            key=lambda p: p.created_at.timestamp() if p.created_at else float("-inf"),
            reverse=True,
        )
        return matches[:self.limit]

    async def get(self, property_id: str) -> Optional[Property]:
        await asyncio.sleep(0)
        return self._properties.get(property_id)

    async def create(self, listing: PropertyCreate) -> Property:
        property_obj = Property(
            id=str(uuid.uuid4()),
            created_at=datetime.now(timezone.utc),
            **listing.model_dump(),
        )
        self._properties[property_obj.id] = property_obj
        logger.info(f"Stored listing {property_obj.id} in memory")
        return property_obj

    def add(self, property_obj: Property):
        self._properties[property_obj.id] = property_obj

    def __len__(self) -> int:
        return len(self._properties)
