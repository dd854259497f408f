import pytest
import asyncio
from datetime import datetime, timezone, timedelta
from typing import List, Optional, Set
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from luxuryhomes.core.database import Base
from luxuryhomes.db import models  # noqa: F401  registers the tables
from luxuryhomes.core.exceptions import QueryFailure
from luxuryhomes.models.property import Property
from luxuryhomes.models.search import CompiledQuery
from luxuryhomes.modules.search.memory_collection import InMemoryPropertyCollection
from luxuryhomes.modules.users.service import FavoriteStore

TEST_DATABASE_URL = "sqlite:///:memory:"

OCEAN_DRIVE_ID = "a1b2c3d4-e5f6-7890-abcd-1234567890ab"
BEACH_TOWER_ID = "b2c3d4e5-f6a7-8901-bcde-234567890abc"
ORLANDO_ID = "c3d4e5f6-a7b8-9012-cdef-34567890abcd"


class CountingPropertyCollection(InMemoryPropertyCollection):
    """In-memory collection that counts searches and can be held open or made to fail"""

    def __init__(self, properties=(), fail_with: Optional[str] = None):
        super().__init__(properties)
        self.search_calls = 0
        self.queries: List[CompiledQuery] = []
        self.fail_with = fail_with
        self.gate: Optional[asyncio.Event] = None
        self.cancelled = 0

    def hold(self) -> asyncio.Event:
        """Block searches until the returned event is set"""
        self.gate = asyncio.Event()
        return self.gate

    async def search(self, query: CompiledQuery) -> List[Property]:
        self.search_calls += 1
        self.queries.append(query)
        try:
            if self.gate is not None:
                await self.gate.wait()
            else:
                await asyncio.sleep(0)
        except asyncio.CancelledError:
            self.cancelled += 1
            raise

        if self.fail_with:
            raise QueryFailure(self.fail_with)
        return await super().search(query)


class FakeFavoriteStore(FavoriteStore):
    """Favorites store in memory, with injectable failures"""

    def __init__(self, initial: Optional[dict] = None):
        self.favorites = {user: set(ids) for user, ids in (initial or {}).items()}
        self.fail_writes = False
        self.fail_reads = False
        self.calls: List[tuple] = []
        self.gate: Optional[asyncio.Event] = None

    async def list_favorites(self, user_id: str) -> Set[str]:
        self.calls.append(("list", user_id))
        if self.fail_reads:
            raise ConnectionError("favorites store unavailable")
        return set(self.favorites.get(user_id, set()))

    async def add_favorite(self, user_id: str, property_id: str) -> None:
        self.calls.append(("add", user_id, property_id))
        await self._write()
        self.favorites.setdefault(user_id, set()).add(property_id)

    async def remove_favorite(self, user_id: str, property_id: str) -> None:
        self.calls.append(("remove", user_id, property_id))
        await self._write()
        self.favorites.setdefault(user_id, set()).discard(property_id)

    async def _write(self):
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if self.fail_writes:
            raise ConnectionError("favorites store unavailable")


def make_property(property_id: str, title: str, location: str, price: int, **overrides) -> Property:
    fields = dict(
        id=property_id,
        title=title,
        description=f"{title} description",
        price=price,
        location=location,
        bedrooms=3,
        bathrooms=2,
        square_feet=2500,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return Property(**fields)


@pytest.fixture
def sample_properties() -> List[Property]:
    base_time = datetime(2024, 6, 1, tzinfo=timezone.utc)
    return [
        make_property(
            OCEAN_DRIVE_ID, "Ocean Drive Villa", "123 Ocean Dr, Miami", 1_250_000,
            home_type="Single Family", image_url="/img/a.jpg, /img/b.jpg",
            created_at=base_time,
        ),
        make_property(
            BEACH_TOWER_ID, "Beach Tower Penthouse", "Miami Beach Tower", 1_800_000,
            home_type="Condo", quick_move_in=True,
            created_at=base_time - timedelta(days=1),
        ),
        make_property(
            ORLANDO_ID, "Lakeside Estate", "Orlando", 6_000_000,
            home_type="Single Family", created_at=base_time - timedelta(days=2),
        ),
    ]


@pytest.fixture
def collection(sample_properties) -> CountingPropertyCollection:
    return CountingPropertyCollection(sample_properties)


@pytest.fixture
def favorite_store() -> FakeFavoriteStore:
    return FakeFavoriteStore()


@pytest.fixture(scope="function")
def test_engine():
    """Create a test database engine"""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    return engine


@pytest.fixture(scope="function")
def test_session_factory(test_engine):
    """Session factory over a fresh schema"""
    Base.metadata.create_all(bind=test_engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    finally:
        Base.metadata.drop_all(bind=test_engine)
