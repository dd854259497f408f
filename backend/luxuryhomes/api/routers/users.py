from fastapi import APIRouter, Depends
from typing import Optional
from luxuryhomes.core.auth import get_current_user_id
from luxuryhomes.core.exceptions import NotFound, Unauthenticated
from luxuryhomes.models.user import FavoriteToggleResponse, FavoritesResponse
from luxuryhomes.modules.properties.slug import resolve_slug
from luxuryhomes.modules.users.favorites import FavoriteReconciler
from luxuryhomes.modules.search.collection import PropertyCollection
from luxuryhomes.api.dependencies import get_favorite_reconciler, get_property_collection
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me/favorites", response_model=FavoritesResponse)
async def get_favorite_properties(
    current_user_id: Optional[str] = Depends(get_current_user_id),
    favorites: FavoriteReconciler = Depends(get_favorite_reconciler)
):
    """Get current user's favorite listing ids."""
    property_ids = await favorites.favorites(current_user_id)
    return FavoritesResponse(user_id=current_user_id, property_ids=sorted(property_ids))


@router.post("/me/favorites/{property_ref}/toggle", response_model=FavoriteToggleResponse)
async def toggle_favorite_property(
    property_ref: str,
    current_user_id: Optional[str] = Depends(get_current_user_id),
    favorites: FavoriteReconciler = Depends(get_favorite_reconciler),
    collection: PropertyCollection = Depends(get_property_collection)
):
    """
    Add the listing to favorites, or remove it if it is already there.

    Accepts a bare listing id or a full slug. Unknown listings are a 404.
    """
    if not current_user_id:
        raise Unauthenticated()

    property_id = resolve_slug(property_ref)
    if property_id is None:
        raise NotFound()

    if await collection.get(property_id) is None:
        raise NotFound(details={"property_id": property_id})

    is_favorite = await favorites.toggle(current_user_id, property_id)
    logger.info(f"User {current_user_id} set favorite={is_favorite} on {property_id}")
    return FavoriteToggleResponse(property_id=property_id, is_favorite=is_favorite)
