import pytest

from luxuryhomes.db.models import FavoriteProperty
from luxuryhomes.modules.users.service import SqlFavoriteStore
from conftest import OCEAN_DRIVE_ID, BEACH_TOWER_ID


@pytest.fixture
def store(test_session_factory):
    return SqlFavoriteStore(session_factory=test_session_factory)


class TestSqlFavoriteStore:
    """Test cases for favorites persisted through SQLAlchemy"""

    @pytest.mark.asyncio
    async def test_empty(self, store):
        assert await store.list_favorites("user-1") == set()

    @pytest.mark.asyncio
    async def test_add_and_list(self, store):
        await store.add_favorite("user-1", OCEAN_DRIVE_ID)
        await store.add_favorite("user-1", BEACH_TOWER_ID)
        await store.add_favorite("user-2", BEACH_TOWER_ID)

        assert await store.list_favorites("user-1") == {OCEAN_DRIVE_ID, BEACH_TOWER_ID}
        assert await store.list_favorites("user-2") == {BEACH_TOWER_ID}

    @pytest.mark.asyncio
    async def test_add_twice_is_noop(self, store, test_session_factory):
        await store.add_favorite("user-1", OCEAN_DRIVE_ID)
        await store.add_favorite("user-1", OCEAN_DRIVE_ID)

        with test_session_factory() as db:
            assert db.query(FavoriteProperty).count() == 1

    @pytest.mark.asyncio
    async def test_remove(self, store):
        await store.add_favorite("user-1", OCEAN_DRIVE_ID)
        await store.remove_favorite("user-1", OCEAN_DRIVE_ID)
        assert await store.list_favorites("user-1") == set()

    @pytest.mark.asyncio
    async def test_remove_missing_is_noop(self, store):
        await store.remove_favorite("user-1", OCEAN_DRIVE_ID)
        assert await store.list_favorites("user-1") == set()
