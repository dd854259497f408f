from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # Favorites store
    DATABASE_URL: str = "sqlite:///./luxuryhomes.db"

    # Property collection
    PROPERTY_BACKEND: str = "elasticsearch"  # "elasticsearch" or "memory"
    ELASTICSEARCH_URL: str = "http://localhost:9200"
    ELASTICSEARCH_TIMEOUT: int = 10
    PROPERTIES_INDEX: str = "properties"

    # Listing search
    SEARCH_RESULT_LIMIT: int = 100
    SIMILAR_PROPERTIES_LIMIT: int = 3
    SEARCH_CACHE_MAX_ENTRIES: int = 256
    SEARCH_CACHE_TTL_SECONDS: int = 300

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000"]

    # Security
    SECRET_KEY: str = "your-secret-key-here"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
