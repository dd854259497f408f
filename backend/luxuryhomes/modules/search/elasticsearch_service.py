from elasticsearch import AsyncElasticsearch, NotFoundError
from datetime import datetime, timezone
from typing import Dict, List, Optional, Any
import uuid
import logging

from luxuryhomes.core.config import settings
from luxuryhomes.core.elasticsearch import es_client, get_elasticsearch
from luxuryhomes.core.exceptions import QueryFailure, ListingSubmissionFailure
from luxuryhomes.models.property import Property, PropertyCreate
from luxuryhomes.models.search import CompiledQuery
from luxuryhomes.modules.search.collection import PropertyCollection
from luxuryhomes.modules.search.query_builder import build_search_body

logger = logging.getLogger(__name__)

PROPERTIES_MAPPING = {
    "mappings": {
        "properties": {
            "id": {"type": "keyword"},
            "title": {
                "type": "text",
                "fields": {
                    "keyword": {"type": "keyword"}
                }
            },
            "description": {"type": "text"},
            "price": {"type": "long"},
            "location": {
                "type": "text",
                "fields": {
                    "keyword": {"type": "keyword"}
                }
            },
            "bedrooms": {"type": "integer"},
            "bathrooms": {"type": "float"},
            "square_feet": {"type": "integer"},
            "home_type": {"type": "keyword"},
            "construction_status": {"type": "keyword"},
            "ownership_type": {"type": "keyword"},
            "quick_move_in": {"type": "boolean"},
            "image_url": {"type": "keyword", "index": False},
            "floorplan_url": {"type": "keyword", "index": False},
            "created_at": {"type": "date"}
        }
    },
    "settings": {
        "number_of_shards": 1,
        "number_of_replicas": 0
    }
}


class ElasticsearchPropertyCollection(PropertyCollection):
    """Property collection stored in an Elasticsearch index"""

    def __init__(self, client: Optional[AsyncElasticsearch] = None, index: Optional[str] = None):
        self.client = client
        self._shared_client = client is None
        self.index = index or settings.PROPERTIES_INDEX

    async def _get_client(self) -> AsyncElasticsearch:
        if self.client is None:
            self.client = await get_elasticsearch()
        return self.client

    async def initialize(self) -> None:
        """Create the properties index with its mapping if it is missing"""
        client = await self._get_client()

        try:
            if await client.indices.exists(index=self.index):
                logger.info(f"Index {self.index} already exists")
                return

            await client.indices.create(index=self.index, body=PROPERTIES_MAPPING)
            logger.info(f"Created index {self.index}")

        except Exception as e:
            logger.error(f"Failed to create index {self.index}: {e}")
            raise QueryFailure("Property index is unavailable", {"index": self.index}) from e

    async def finalize(self) -> None:
        if self._shared_client:
            await es_client.disconnect()
        elif self.client is not None:
            await self.client.close()
        self.client = None

    async def health_check(self) -> bool:
        try:
            client = await self._get_client()
            return bool(await client.ping())
        except Exception as e:
            logger.warning(f"Elasticsearch health check failed: {e}")
            return False

    def _to_property(self, source: Dict[str, Any]) -> Property:
        return Property.model_validate(source)

    async def search(self, query: CompiledQuery) -> List[Property]:
        body = build_search_body(query, settings.SEARCH_RESULT_LIMIT)

        try:
            client = await self._get_client()
            response = await client.search(index=self.index, body=body)
        except Exception as e:
            logger.error(f"Property search failed: {e}")
            raise QueryFailure("Failed to retrieve properties", {"reason": str(e)}) from e

        return [self._to_property(hit["_source"]) for hit in response["hits"]["hits"]]

    async def get(self, property_id: str) -> Optional[Property]:
        try:
            client = await self._get_client()
            response = await client.get(index=self.index, id=property_id)
        except NotFoundError:
            return None
        except Exception as e:
            logger.error(f"Failed to fetch property {property_id}: {e}")
            raise QueryFailure("Failed to retrieve property", {"property_id": property_id}) from e

        if not response.get("found"):
            return None
        return self._to_property(response["_source"])

    async def create(self, listing: PropertyCreate) -> Property:
        property_obj = Property(
            id=str(uuid.uuid4()),
            created_at=datetime.now(timezone.utc),
            **listing.model_dump(),
        )

        try:
            client = await self._get_client()
            await client.index(
                index=self.index,
                id=property_obj.id,
                document=property_obj.to_record(),
                refresh="wait_for",
            )
        except Exception as e:
            logger.error(f"Failed to index listing {property_obj.id}: {e}")
            raise ListingSubmissionFailure(
                "Failed to upload property. Please try again.", {"reason": str(e)}
            ) from e

        logger.info(f"Indexed listing {property_obj.id}")
        return property_obj
