"""
Temple Billing - Settings
Application settings loaded from environment variables / .env
"""

from functools import lru_cache
from typing import List, Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # App
    APP_NAME: str = "Temple Billing"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database (sqlite+aiosqlite for a single counter, postgresql+asyncpg for a server install)
    DATABASE_URL: str = "sqlite+aiosqlite:///./temple.db"

    # Redis (login sessions)
    REDIS_URL: str = "redis://localhost:6379/0"

    # Auth
    SECRET_KEY: str = "temple-secret-change-in-production"
    ALGORITHM: str = "HS256"
    SESSION_IDLE_MINUTES: int = 15  # session expires after this much inactivity

    CORS_ORIGINS: str = "http://localhost:3000"

    # Initial admin account
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin_password"

    # Business clock
    TIMEZONE: str = "Asia/Kolkata"

    # Receipts
    RECEIPT_PREFIX: str = "SRI"
    # How a fiscal year's counter is seeded from existing receipts:
    # "insertion" = last inserted receipt, "serial" = highest numeric serial
    RECEIPT_SEED_ORDER: Literal["insertion", "serial"] = "insertion"

    # Cash handover
    # "today" = always record against the server's current date
    # "viewed" = record against the date the collections view was showing
    WITHDRAWAL_DATE_POLICY: Literal["today", "viewed"] = "today"
    # False: an unparseable handover amount counts as 0; True: it is rejected
    STRICT_HANDOVER_AMOUNT: bool = False

    @property
    def cors_origins_list(self) -> List[str]:
        """CORS allowed origins"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Cached settings singleton"""
    return Settings()


settings = get_settings()
