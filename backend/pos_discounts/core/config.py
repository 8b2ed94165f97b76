from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    ENV: str = "development"
    DATABASE_URL: str = "sqlite:///./discounts.db"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8080"

    LOG_LEVEL: str = "INFO"

    # Seed
    DEFAULT_CAMPAIGN_NAME: str = "Default Discounts"

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    class Config:
        env_file = ".env"


settings = Settings()
