from abc import ABC, abstractmethod
from typing import Callable, Set
from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from luxuryhomes.core.database import SessionLocal
from luxuryhomes.db.models import FavoriteProperty as DBFavoriteProperty
import logging

logger = logging.getLogger(__name__)


class FavoriteStore(ABC):
    """Remote store of record for users' favorite listings"""

    @abstractmethod
    async def list_favorites(self, user_id: str) -> Set[str]:
        ...

    @abstractmethod
    async def add_favorite(self, user_id: str, property_id: str) -> None:
        ...

    @abstractmethod
    async def remove_favorite(self, user_id: str, property_id: str) -> None:
        ...


class SqlFavoriteStore(FavoriteStore):
    """Favorites persisted through SQLAlchemy"""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory

    async def list_favorites(self, user_id: str) -> Set[str]:
        with self.session_factory() as db:
            rows = db.query(DBFavoriteProperty.property_id).filter(
                DBFavoriteProperty.user_id == user_id
            ).all()
            return {row.property_id for row in rows}

    async def add_favorite(self, user_id: str, property_id: str) -> None:
        """Add a listing to the user's favorites; adding twice is a no-op"""
        with self.session_factory() as db:
            try:
                db.add(DBFavoriteProperty(user_id=user_id, property_id=property_id))
                db.commit()
            except IntegrityError:
                db.rollback()
                logger.info(f"Property {property_id} already in favorites of {user_id}")
            except Exception as e:
                db.rollback()
                logger.error(f"Failed to add favorite property: {e}")
                raise

    async def remove_favorite(self, user_id: str, property_id: str) -> None:
        """Remove a listing from the user's favorites; removing a missing one is a no-op"""
        with self.session_factory() as db:
            try:
                deleted = db.query(DBFavoriteProperty).filter(
                    and_(
                        DBFavoriteProperty.user_id == user_id,
                        DBFavoriteProperty.property_id == property_id
                    )
                ).delete(synchronize_session=False)
                db.commit()
            except Exception as e:
                db.rollback()
                logger.error(f"Failed to remove favorite property: {e}")
                raise

            if not deleted:
                logger.info(f"Property {property_id} was not in favorites of {user_id}")
