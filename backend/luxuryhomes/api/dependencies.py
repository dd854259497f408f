"""
Application-scoped collaborators, injected into routers with Depends().

Each is created once per process; tests replace them through
app.dependency_overrides.
"""

from typing import Optional
from fastapi import Depends

from luxuryhomes.modules.properties.service import PropertyService
from luxuryhomes.modules.search.collection import PropertyCollection, create_property_collection
from luxuryhomes.modules.search.coordinator import FetchCoordinator
from luxuryhomes.modules.users.favorites import FavoriteReconciler
from luxuryhomes.modules.users.service import SqlFavoriteStore

_collection: Optional[PropertyCollection] = None
_coordinator: Optional[FetchCoordinator] = None
_favorites: Optional[FavoriteReconciler] = None


def get_property_collection() -> PropertyCollection:
    global _collection
    if _collection is None:
        _collection = create_property_collection()
    return _collection


def get_fetch_coordinator(
    collection: PropertyCollection = Depends(get_property_collection),
) -> FetchCoordinator:
    global _coordinator
    if _coordinator is None:
        _coordinator = FetchCoordinator(collection)
    return _coordinator


def get_favorite_reconciler() -> FavoriteReconciler:
    global _favorites
    if _favorites is None:
        _favorites = FavoriteReconciler(SqlFavoriteStore())
    return _favorites


def get_property_service(
    collection: PropertyCollection = Depends(get_property_collection),
    coordinator: FetchCoordinator = Depends(get_fetch_coordinator),
    favorites: FavoriteReconciler = Depends(get_favorite_reconciler),
) -> PropertyService:
    return PropertyService(collection, coordinator, favorites)
