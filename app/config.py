"""
Application settings read from the environment (and a .env file if present).
"""
import logging
import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Runtime configuration."""
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    database_url: str = Field("sqlite:///finance.db", description="Local store used when Supabase is not configured")
    user_id: str = Field("local-user", description="User the store is scoped to")
    log_level: str = "INFO"

    @property
    def supabase_enabled(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


def load_settings() -> Settings:
    """Load settings from environment variables."""
    load_dotenv(find_dotenv(usecwd=True))
    return Settings(
        supabase_url=os.getenv("SUPABASE_URL") or None,
        supabase_key=os.getenv("SUPABASE_KEY") or None,
        database_url=os.getenv("DATABASE_URL", "sqlite:///finance.db"),
        user_id=os.getenv("MONIVA_USER_ID", "local-user"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper()
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
