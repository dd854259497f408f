from pydantic import BaseModel
from typing import List
from enum import Enum


class FavoriteState(str, Enum):
    UNKNOWN = "unknown"  # favorites not loaded yet for this user
    FAVORITED = "favorited"
    NOT_FAVORITED = "not_favorited"


class FavoriteToggleResponse(BaseModel):
    property_id: str
    is_favorite: bool


class FavoritesResponse(BaseModel):
    user_id: str
    property_ids: List[str] = []
