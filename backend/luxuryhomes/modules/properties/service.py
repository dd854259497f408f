from typing import List, Optional
import re
import logging

from luxuryhomes.core.config import settings
from luxuryhomes.core.exceptions import DiscoveryError, NotFound, QueryFailure
from luxuryhomes.models.property import (
    Property, PropertyCreate, PropertyCreatedResponse, PropertyDetailsResponse
)
from luxuryhomes.models.search import FilterState
from luxuryhomes.modules.properties.slug import build_slug, resolve_slug
from luxuryhomes.modules.search.collection import PropertyCollection
from luxuryhomes.modules.search.coordinator import FetchCoordinator
from luxuryhomes.modules.users.favorites import FavoriteReconciler

logger = logging.getLogger(__name__)

# Trailing "FL" / "FL 33139" style segments are not the city
_STATE_SEGMENT = re.compile(r"^[A-Z]{2}(\s+\d{5}(-\d{4})?)?$")


def city_from_location(location: str) -> str:
    """Best-effort city name from a "Street, City, ST" location string"""
    segments = [part.strip() for part in location.split(",") if part.strip()]
    while len(segments) > 1 and _STATE_SEGMENT.match(segments[-1]):
        segments.pop()
    return segments[-1] if segments else ""


class PropertyService:
    """Listing detail, similar listings and submission"""

    def __init__(
        self,
        collection: PropertyCollection,
        coordinator: FetchCoordinator,
        favorites: FavoriteReconciler,
    ):
        self.collection = collection
        self.coordinator = coordinator
        self.favorites = favorites

    async def get_property(self, slug: str) -> Property:
        property_id = resolve_slug(slug)
        if property_id is None:
            # No lookup with a missing or malformed key
            logger.info(f"No listing id in route segment {slug!r}")
            raise NotFound()

        property_obj = await self.collection.get(property_id)
        if property_obj is None:
            raise NotFound(details={"property_id": property_id})
        return property_obj

    async def get_details(
        self,
        slug: str,
        user_id: Optional[str] = None,
        include_similar: bool = True,
    ) -> PropertyDetailsResponse:
        property_obj = await self.get_property(slug)

        response = PropertyDetailsResponse(
            property=property_obj,
            slug=build_slug(property_obj.id, property_obj.title),
            images=property_obj.images,
        )

        if user_id:
            try:
                response.is_favorite = await self.favorites.is_favorite(user_id, property_obj.id)
            except DiscoveryError as e:
                logger.warning(f"Failed to get favorite state for {property_obj.id}: {e}")

        if include_similar:
            try:
                response.similar_properties = await self.get_similar(property_obj)
            except QueryFailure as e:
                logger.warning(f"Failed to get similar properties for {property_obj.id}: {e}")

        return response

    async def get_similar(self, property_obj: Property, limit: Optional[int] = None) -> List[Property]:
        """Other listings in the same city, through the shared search cache"""
        limit = limit or settings.SIMILAR_PROPERTIES_LIMIT
        city = city_from_location(property_obj.location)
        if not city:
            return []

        result = await self.coordinator.fetch(FilterState(city=city))
        if result.is_error:
            raise QueryFailure(result.error or "Failed to retrieve properties")

        return [p for p in result.data if p.id != property_obj.id][:limit]

    async def submit(self, listing: PropertyCreate) -> PropertyCreatedResponse:
        property_obj = await self.collection.create(listing)

        # Cached searches predate the new listing
        self.coordinator.clear()

        logger.info(f"Listing {property_obj.id} submitted")
        return PropertyCreatedResponse(
            property=property_obj,
            slug=build_slug(property_obj.id, property_obj.title),
        )
