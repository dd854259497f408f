from sqlalchemy import Column, String, DateTime, Index
from sqlalchemy.sql import func
from luxuryhomes.core.database import Base
import uuid


class FavoriteProperty(Base):
    """A listing a user has marked as favorite"""
    __tablename__ = "favorite_properties"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Identity comes from the auth provider, listings live in the property collection
    user_id = Column(String(64), nullable=False)
    property_id = Column(String(36), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index('idx_favorite_properties_user_id', 'user_id'),
        # Unique constraint to prevent duplicate saves
        Index('idx_favorite_properties_unique', 'user_id', 'property_id', unique=True),
    )
