from __future__ import annotations

from functools import lru_cache
import json
from typing import Annotated, Literal

from pydantic import AliasChoices, Field, computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    # Load from env vars in production/docker, but also support local dev via .env.
    # Order matters: prefer ./.env, then the parent directory's .env.
    model_config = SettingsConfigDict(env_file=(".env", "../.env"), extra="ignore")

    supabase_url: str = Field(
        validation_alias=AliasChoices("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL", "supabase_url")
    )

    # Supabase keys:
    # - the anon (public) key is what the storefront runs with; row access is governed by RLS.
    # - the service role key bypasses RLS and MUST stay server-side.
    supabase_anon_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "SUPABASE_ANON_KEY",
            "NEXT_PUBLIC_SUPABASE_ANON_KEY",
            # Back-compat for older env names
            "SUPABASE_KEY",
            "supabase_anon_key",
        ),
    )

    supabase_service_role_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "SUPABASE_SERVICE_ROLE_KEY",
            "SUPABASE_SERVICE_KEY",
            "supabase_service_role_key",
        ),
    )

    environment: Literal["development", "production", "test"] = Field(
        default="development",
        validation_alias=AliasChoices("ENV", "ENVIRONMENT", "environment"),
    )

    log_level: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))

    # Raw storage messages in `details` help debugging but leak schema names.
    expose_error_details: bool = Field(
        default=True,
        validation_alias=AliasChoices("EXPOSE_ERROR_DETAILS", "expose_error_details"),
    )

    # CORS: set explicitly in production. Accepts either JSON array (preferred) or comma-separated string.
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        validation_alias=AliasChoices("CORS_ALLOW_ORIGINS", "cors_allow_origins"),
    )
    cors_allow_methods: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        validation_alias=AliasChoices("CORS_ALLOW_METHODS", "cors_allow_methods"),
    )
    cors_allow_headers: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["*"],
        validation_alias=AliasChoices("CORS_ALLOW_HEADERS", "cors_allow_headers"),
    )

    # Optional hardening; when set, rejects requests with unknown Host headers.
    trusted_hosts: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        validation_alias=AliasChoices("TRUSTED_HOSTS", "trusted_hosts"),
    )

    # Only enable when the API is served over HTTPS (directly or via a reverse proxy).
    enable_hsts: bool = Field(default=False, validation_alias=AliasChoices("ENABLE_HSTS", "enable_hsts"))

    backend_port: int = Field(default=8080, validation_alias=AliasChoices("PORT", "BACKEND_PORT", "backend_port"))

    @model_validator(mode="after")
    def _validate_supabase_keys(self) -> "Settings":
        if not self.supabase_url.strip():
            raise ValueError("Missing Supabase environment variables: set SUPABASE_URL")
        if self.supabase_anon_key or self.supabase_service_role_key:
            return self
        raise ValueError(
            "Missing Supabase environment variables: set SUPABASE_ANON_KEY "
            "(or SUPABASE_SERVICE_ROLE_KEY for trusted deployments)"
        )

    @computed_field
    @property
    def supabase_key(self) -> str:
        key = self.supabase_anon_key or self.supabase_service_role_key
        if not key:
            raise ValueError("Missing Supabase environment variables: set SUPABASE_ANON_KEY")
        return key

    @field_validator("cors_allow_origins", "cors_allow_methods", "cors_allow_headers", "trusted_hosts", mode="before")
    @classmethod
    def _split_csv_or_passthrough(cls, v):
        if v is None:
            return []
        if isinstance(v, (list, tuple, set)):
            return [str(x).strip() for x in v if str(x).strip()]
        if isinstance(v, str):
            raw = v.strip()
            if not raw:
                return []
            # Accept JSON arrays (preferred) like: ["https://example.com", "https://www.example.com"]
            if raw.startswith("[") and raw.endswith("]"):
                try:
                    parsed = json.loads(raw)
                except ValueError:
                    raise ValueError(
                        "Invalid JSON array for setting; expected e.g. ['https://example.com']"
                    )

                if isinstance(parsed, list):
                    return [str(x).strip() for x in parsed if str(x).strip()]
                if isinstance(parsed, str) and parsed.strip():
                    return [parsed.strip()]
                return []
            return [x.strip() for x in raw.split(",") if x.strip()]
        return v

    @property
    def effective_cors_allow_origins(self) -> list[str]:
        if self.cors_allow_origins:
            return self.cors_allow_origins

        # Dev-friendly defaults only (Next.js storefront dev server).
        if self.environment != "production":
            return [
                "http://localhost:3000",
                "http://127.0.0.1:3000",
            ]

        # In production, require explicit allowlist.
        return []


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # BaseSettings loads required fields from environment/.env at runtime.
    return Settings()  # type: ignore[call-arg]
