from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    DATABASE_URL : str
    DB_ECHO : bool = False
    DB_POOL_SIZE : int = 10
    DB_MAX_OVERFLOW : int = 20
    DB_POOL_TIMEOUT : int = 60

    JWT_SECRET : str
    JWT_ALGORITHM : str = "HS256"
    ACCESS_TOKEN_EXPIRY_MINUTES : int = 60

    # Load every review into the in-memory cache when the app starts
    REVIEW_CACHE_PRELOAD : bool = True

    CORS_ORIGINS : List[str] = ["http://localhost:3000"]
    LOG_LEVEL : str = "INFO"

    model_config = SettingsConfigDict(
        env_file = ".env",
        extra = "ignore"
    )


Config = Settings()
