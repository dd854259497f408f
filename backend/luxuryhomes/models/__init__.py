# Pydantic models for API contracts

from .property import (
    Property, PropertyCreate, PropertyCreatedResponse, PropertyDetailsResponse,
    split_image_references, PLACEHOLDER_IMAGE
)
from .search import (
    # Filter state and compiled queries
    FilterState, ClauseOp, Clause, CompiledQuery,

    # Fetch results
    FetchStatus, FetchResult, DisplayMode, MapMarker, PropertySearchResponse
)
from .user import FavoriteState, FavoriteToggleResponse, FavoritesResponse

__all__ = [
    # Property models
    "Property", "PropertyCreate", "PropertyCreatedResponse", "PropertyDetailsResponse",
    "split_image_references", "PLACEHOLDER_IMAGE",

    # Search models
    "FilterState", "ClauseOp", "Clause", "CompiledQuery",
    "FetchStatus", "FetchResult", "DisplayMode", "MapMarker", "PropertySearchResponse",

    # User models
    "FavoriteState", "FavoriteToggleResponse", "FavoritesResponse"
]
