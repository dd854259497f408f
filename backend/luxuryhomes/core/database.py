from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from luxuryhomes.core.config import settings

# SQLite needs the same connection shared across the event loop thread pool
connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    settings.DATABASE_URL,
    connect_args=connect_args,
    pool_pre_ping=True,
)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for SQLAlchemy models
Base = declarative_base()


def init_db():
    """Create the favorites tables if they do not exist yet"""
    from luxuryhomes.db import models  # noqa: F401  registers the tables

    Base.metadata.create_all(bind=engine)

