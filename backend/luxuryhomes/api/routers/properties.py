from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from luxuryhomes.core.auth import get_current_user_id
from luxuryhomes.core.exceptions import QueryFailure
from luxuryhomes.models.property import (
    Property, PropertyCreate, PropertyCreatedResponse, PropertyDetailsResponse
)
from luxuryhomes.models.search import (
    DisplayMode, MapMarker, PropertySearchResponse,
    DEFAULT_PRICE_RANGE, DEFAULT_BEDROOM_RANGE, DEFAULT_BATHROOM_RANGE, DEFAULT_SQUARE_FEET_RANGE
)
from luxuryhomes.modules.properties.service import PropertyService
from luxuryhomes.modules.properties.slug import build_slug
from luxuryhomes.modules.search.coordinator import FetchCoordinator
from luxuryhomes.modules.search.view import ListingsView
from luxuryhomes.api.dependencies import get_fetch_coordinator, get_property_service
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=PropertySearchResponse)
async def search_properties(
    location: str = Query("", description="Substring of the listing location"),
    city: str = Query("", description="City the listing is in"),
    min_price: int = Query(DEFAULT_PRICE_RANGE[0]),
    max_price: int = Query(DEFAULT_PRICE_RANGE[1]),
    min_bedrooms: int = Query(DEFAULT_BEDROOM_RANGE[0]),
    max_bedrooms: int = Query(DEFAULT_BEDROOM_RANGE[1]),
    min_bathrooms: float = Query(DEFAULT_BATHROOM_RANGE[0]),
    max_bathrooms: float = Query(DEFAULT_BATHROOM_RANGE[1]),
    min_square_feet: int = Query(DEFAULT_SQUARE_FEET_RANGE[0]),
    max_square_feet: int = Query(DEFAULT_SQUARE_FEET_RANGE[1]),
    home_type: Optional[str] = Query(None),
    construction_status: Optional[str] = Query(None),
    ownership_type: Optional[str] = Query(None),
    quick_move_in: bool = Query(False),
    view: DisplayMode = Query(DisplayMode.MAP, description="Map view adds map markers"),
    coordinator: FetchCoordinator = Depends(get_fetch_coordinator)
):
    """
    Browse listings.

    Identical filter combinations share one cached result; the list and the
    map markers always come from that same result.
    """
    listings = ListingsView(coordinator, display_mode=view)
    try:
        result = await listings.apply(
            location=location,
            city=city,
            price_range=(min_price, max_price),
            bedroom_range=(min_bedrooms, max_bedrooms),
            bathroom_range=(min_bathrooms, max_bathrooms),
            square_feet_range=(min_square_feet, max_square_feet),
            home_type=home_type,
            construction_status=construction_status,
            ownership_type=ownership_type,
            quick_move_in=quick_move_in,
        )

        if result is None or result.is_error:
            raise QueryFailure(result.error if result else "Failed to retrieve properties")

        properties = listings.list_items()
        return PropertySearchResponse(
            status=result.status,
            count=len(properties),
            properties=properties,
            display_mode=listings.display_mode,
            markers=[
                MapMarker(
                    id=p.id,
                    title=p.title,
                    price=p.price,
                    location=p.location,
                    slug=build_slug(p.id, p.title),
                )
                for p in listings.map_markers()
            ],
            filters_applied=listings.filters,
        )
    finally:
        listings.close()


@router.post("/", response_model=PropertyCreatedResponse, status_code=status.HTTP_201_CREATED)
async def submit_property(
    listing: PropertyCreate,
    property_service: PropertyService = Depends(get_property_service)
):
    """Submit a new listing."""
    return await property_service.submit(listing)


@router.get("/{slug}", response_model=PropertyDetailsResponse)
async def get_property_details(
    slug: str,
    include_similar: bool = Query(True, description="Include similar properties"),
    user_id: Optional[str] = Depends(get_current_user_id),
    property_service: PropertyService = Depends(get_property_service)
):
    """
    Get a listing by its "<id>-<title>" slug.

    A slug without a valid listing id is a 404 without any lookup.
    """
    return await property_service.get_details(slug, user_id=user_id, include_similar=include_similar)


@router.get("/{slug}/similar", response_model=List[Property])
async def get_similar_properties(
    slug: str,
    limit: int = Query(3, ge=1, le=20, description="Maximum number of listings to return"),
    property_service: PropertyService = Depends(get_property_service)
):
    """Other listings in the same city."""
    property_obj = await property_service.get_property(slug)
    return await property_service.get_similar(property_obj, limit=limit)
