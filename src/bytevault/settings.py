"""
bytevault.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (principal passwords and hashes).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration for the vault.

    The two principals are configured here and nowhere else; the credential
    store is built from these values once at startup.
    """

    model_config = SettingsConfigDict(env_prefix="BYTEVAULT_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "bytevault"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 3000

    # Principals. A plaintext password is hashed at startup; a pre-computed
    # bcrypt hash wins when both are set.
    admin_username: str = "admin"
    admin_password: SecretStr | None = Field(default=None, repr=False)
    admin_password_hash: SecretStr | None = Field(default=None, repr=False)
    user_username: str = "user"
    user_password: SecretStr | None = Field(default=None, repr=False)
    user_password_hash: SecretStr | None = Field(default=None, repr=False)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Sessions
    session_ttl_seconds: int = Field(default=24 * 60 * 60, gt=0)
    session_cookie_name: str = "bytevault_session"

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./bytevault.db"
    auto_create_schema: bool = True
    storage_dir: Path = Path("./uploads")
    upload_chunk_size: int = Field(default=1024 * 1024, gt=0)

    # Optional directory with login.html / dashboard.html and their assets.
    static_dir: Path | None = None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Every other module reads configuration through `Settings`; nothing else
# consults the environment directly.
