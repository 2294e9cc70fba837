# auditkit/config/settings.py

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class AuditSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="AUDITKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # --- Audit ---
    current_user: Optional[str] = None
    audit_with: str = "memory"

    # --- Backend HTTP ---
    user_agent: str = "auditkit/0.1.0"
    ssl_verify: bool = True
    http_timeout_seconds: float = 10.0
    http_logging: bool = False

    # --- Audit stores ---
    database_url: str = "sqlite:///audit.db"
    redis_url: str = "redis://localhost:6379/0"

    # --- Observability ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


@lru_cache
def get_settings() -> AuditSettings:
    return AuditSettings()
