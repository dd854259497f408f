"""
Favorite reconciliation.

Each toggle is a two-phase operation: the local favorite set is changed first
(tentative commit), then the favorites store is asked to confirm. If the store
fails, the local change is rolled back and FavoriteSyncFailure is raised.
Toggles on the same (user, property) pair are queued behind one another.
"""

from typing import Dict, Optional, Set, Tuple
import asyncio
import logging

from luxuryhomes.core.exceptions import FavoriteSyncFailure, Unauthenticated
from luxuryhomes.models.user import FavoriteState
from luxuryhomes.modules.users.service import FavoriteStore

logger = logging.getLogger(__name__)


class FavoriteReconciler:
    """Session copy of each user's favorite set, kept in step with the store"""

    def __init__(self, store: FavoriteStore):
        self.store = store
        self._favorites: Dict[str, Set[str]] = {}
        self._pair_locks: Dict[Tuple[str, str], asyncio.Lock] = {}
        self._pair_waiting: Dict[Tuple[str, str], int] = {}
        self._load_locks: Dict[str, asyncio.Lock] = {}

    def state(self, user_id: Optional[str], property_id: str) -> FavoriteState:
        favorites = self._favorites.get(user_id) if user_id else None
        if favorites is None:
            return FavoriteState.UNKNOWN
        return FavoriteState.FAVORITED if property_id in favorites else FavoriteState.NOT_FAVORITED

    async def favorites(self, user_id: Optional[str]) -> Set[str]:
        """The user's favorite ids, loading them on first use"""
        if not user_id:
            raise Unauthenticated()
        return set(await self._ensure_loaded(user_id))

    async def is_favorite(self, user_id: Optional[str], property_id: str) -> bool:
        if not user_id:
            return False
        return property_id in await self._ensure_loaded(user_id)

    async def toggle(self, user_id: Optional[str], property_id: str) -> bool:
        """Flip the favorite flag for a listing and return the new value"""
        if not user_id:
            # No identity, no optimistic flip
            raise Unauthenticated()

        key = (user_id, property_id)
        lock = self._pair_locks.setdefault(key, asyncio.Lock())
        self._pair_waiting[key] = self._pair_waiting.get(key, 0) + 1
        try:
            async with lock:
                return await self._toggle_locked(user_id, property_id)
        finally:
            # Nobody holds or waits on an idle lock, so it can go
            self._pair_waiting[key] -= 1
            if not self._pair_waiting[key]:
                del self._pair_waiting[key]
                del self._pair_locks[key]

    async def _toggle_locked(self, user_id: str, property_id: str) -> bool:
        favorites = await self._ensure_loaded(user_id)
        was_favorite = property_id in favorites

        # Tentative local commit
        if was_favorite:
            favorites.discard(property_id)
        else:
            favorites.add(property_id)

        try:
            if was_favorite:
                await self.store.remove_favorite(user_id, property_id)
            else:
                await self.store.add_favorite(user_id, property_id)
        except Exception as e:
            # Roll back the tentative commit
            if was_favorite:
                favorites.add(property_id)
            else:
                favorites.discard(property_id)
            logger.warning(f"Favorite sync failed for {user_id}/{property_id}: {e}")
            raise FavoriteSyncFailure(
                "Failed to update favorites",
                {"property_id": property_id},
            ) from e

        logger.debug(f"Property {property_id} favorite={not was_favorite} for {user_id}")
        return not was_favorite

    def forget(self, user_id: str):
        """Drop the session copy for a user, e.g. on sign-out"""
        self._favorites.pop(user_id, None)
        self._load_locks.pop(user_id, None)

    async def _ensure_loaded(self, user_id: str) -> Set[str]:
        favorites = self._favorites.get(user_id)
        if favorites is not None:
            return favorites

        lock = self._load_locks.setdefault(user_id, asyncio.Lock())
        async with lock:
            # Another caller may have loaded while we waited
            favorites = self._favorites.get(user_id)
            if favorites is None:
                try:
                    favorites = set(await self.store.list_favorites(user_id))
                except Exception as e:
                    logger.warning(f"Failed to load favorites for {user_id}: {e}")
                    raise FavoriteSyncFailure("Failed to load favorites") from e
                self._favorites[user_id] = favorites
                # Loaded users never take the lock again
                self._load_locks.pop(user_id, None)
            return favorites
