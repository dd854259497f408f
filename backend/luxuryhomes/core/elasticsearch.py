from elasticsearch import AsyncElasticsearch
from typing import Optional
from luxuryhomes.core.config import settings
import logging

logger = logging.getLogger(__name__)


class ElasticsearchClient:
    """Owns the single AsyncElasticsearch connection used by the listing collection"""

    def __init__(self, url: Optional[str] = None):
        self.url = url or settings.ELASTICSEARCH_URL
        self.client: Optional[AsyncElasticsearch] = None

    async def connect(self) -> AsyncElasticsearch:
        """Open the connection, replacing a previous one"""
        if self.client:
            await self.client.close()

        self.client = AsyncElasticsearch(
            [self.url],
            request_timeout=settings.ELASTICSEARCH_TIMEOUT,
            verify_certs=False,
            ssl_show_warn=False,
        )
        logger.info(f"Connected to Elasticsearch at {self.url}")
        return self.client

    async def disconnect(self):
        if self.client:
            await self.client.close()
            self.client = None
            logger.info("Disconnected from Elasticsearch")


# Global Elasticsearch client instance
es_client = ElasticsearchClient()


async def get_elasticsearch() -> AsyncElasticsearch:
    """Return the shared client, connecting lazily"""
    if not es_client.client:
        await es_client.connect()
    return es_client.client
