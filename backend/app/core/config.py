from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DEBUG: bool = False
    APP_NAME: str = "Travel Desk"
    APP_DATABASE_DSN: str = "sqlite:////tmp/travel_desk.db"
    REDIS_URL: str = "redis://localhost:6379"
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Payments
    CURRENCY: str = "UZS"
    PAYMENT_TOLERANCE: Decimal = Decimal("1")  # absolute, in currency units
    PAYMENT_RETRY_ATTEMPTS: int = 3

    # Idempotency-Key records older than this are purged by the worker
    IDEMPOTENCY_MAX_AGE_HOURS: int = 24

    version: str = "0.1.0"


settings = Settings()
