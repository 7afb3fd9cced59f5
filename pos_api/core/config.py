# pos_api/core/config.py

from decimal import Decimal
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    ENV: Literal["development", "production", "test"] = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Security
    SECRET_KEY: str
    ALGORITHM: Literal["HS256"] = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12

    # Login throttling (slowapi / limits syntax)
    LOGIN_RATE_LIMIT: str = "5/15minutes"

    # Database
    DATABASE_URL: str = "sqlite:///./pos.db"

    # Checkout
    TAX_RATE: Decimal = Decimal("0.12")
    LOYALTY_SPEND_PER_POINT: Decimal = Decimal("100")

    # Frontend
    CORS_ORIGINS: list[str] = [
        "http://127.0.0.1:5000",
        "http://localhost:5000",
    ]

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="forbid",
    )

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"


settings = Settings()
