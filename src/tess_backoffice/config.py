"""Configuration management for the back office service."""

from __future__ import annotations

import os
import secrets
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    database_url: str
    host: str
    port: int
    debug: bool
    log_level: str
    default_admin_password: str | None
    password_hash_iterations: int
    secret_key: str
    token_expire_minutes: int
    default_critical_level: int
    expiry_window_days: int
    sales_tax_rate: Decimal

    @property
    def HOST(self) -> str:
        """Alias for host."""
        return self.host

    @property
    def PORT(self) -> int:
        """Alias for port."""
        return self.port

    @property
    def DEBUG(self) -> bool:
        """Alias for debug."""
        return self.debug

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        return cls(
            database_url=os.getenv("DATABASE_URL", "sqlite:///./tess.db"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            default_admin_password=os.getenv("DEFAULT_ADMIN_PASSWORD") or None,
            password_hash_iterations=int(os.getenv("PASSWORD_HASH_ITERATIONS", "120000")),
            # Unset means tokens do not survive a restart
            secret_key=os.getenv("SECRET_KEY") or secrets.token_urlsafe(32),
            token_expire_minutes=int(os.getenv("TOKEN_EXPIRE_MINUTES", "480")),
            default_critical_level=int(os.getenv("DEFAULT_CRITICAL_LEVEL", "10")),
            expiry_window_days=int(os.getenv("EXPIRY_WINDOW_DAYS", "30")),
            sales_tax_rate=Decimal(os.getenv("SALES_TAX_RATE", "0.12")),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
