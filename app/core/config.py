from pydantic_settings import BaseSettings
from pathlib import Path

class Settings(BaseSettings):
    DATA_DIR: str = str(Path(__file__).resolve().parents[1] / "data")

    REDIS_URL: str = ""

    RATE_LIMIT: int = 100
    RATE_LIMIT_WINDOW: int = 600  # 10 minutes

    PRICE_CACHE_TTL: int = 60   # 60 seconds

    API_TITLE: str = "Service Quote Microservice"
    API_DESCRIPTION: str = "Quote calculation for field service contracts backed by static rate tables"
    API_VERSION: str = "1.0.0"

    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
