"""
tokenkeeper.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the token service and its host.
- Hide secrets from repr/logging (e.g., JWT secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_member_fields() -> dict[str, str]:
    # Output key -> Principal attribute.
    return {
        "id": "id",
        "email": "email",
        "firstName": "first_name",
        "surname": "surname",
    }


class Settings(BaseSettings):
    """
    Read-only configuration consumed by `TokenService`.

    The secret has no default: a service without one refuses to start issuing.
    """

    model_config = SettingsConfigDict(env_prefix="TOKENKEEPER_", case_sensitive=False, frozen=True)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "tokenkeeper"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Used as the default `iss` claim.
    base_url: str = "http://localhost:8080/"

    # Tokens
    jwt_secret: str | None = Field(default=None, repr=False)
    jwt_alg: Literal["HS256"] = "HS256"
    jwt_issuer: str | None = None
    lifetime_in_days: int = Field(default=7, ge=0)
    renew_threshold_in_minutes: int = Field(default=60, ge=0)
    included_member_fields: dict[str, str] = Field(default_factory=_default_member_fields)

    # Credentials
    member_identifier_field: str = "email"
    disclose_auth_failure_reason: bool = False
    members_file: Path | None = None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Tests build `Settings(...)` directly; call `get_settings.cache_clear()` when
# env vars are patched between cases.
