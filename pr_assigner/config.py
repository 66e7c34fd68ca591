"""
Settings loaded from the environment.

Django's ``settings.py`` reads everything through :func:`get_settings`, so the
values below are the only knobs the service exposes.
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # =========================================================================
    # Runtime
    # =========================================================================
    env: str = Field(default="dev", description="Deployment environment name")
    debug: bool = Field(default=False)
    secret_key: str = Field(default="dev-insecure-secret-key")
    allowed_hosts: str = Field(
        default="*",
        description="Comma-separated list of allowed hosts"
    )

    # =========================================================================
    # Database
    # =========================================================================
    db_engine: str = Field(default="sqlite", description="sqlite or postgres")
    sqlite_path: str = Field(default="db.sqlite3")

    pg_host: str = Field(default="localhost")
    pg_port: int = Field(default=5432, ge=1, le=65535)
    pg_user: str = Field(default="postgres")
    pg_password: str = Field(default="postgres")
    pg_dbname: str = Field(default="pullrequest_db")
    pg_sslmode: str = Field(default="disable")

    # =========================================================================
    # Logging
    # =========================================================================
    log_level: str = Field(default="INFO")
    log_json_format: bool = Field(default=False)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("db_engine")
    @classmethod
    def validate_db_engine(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in {"sqlite", "postgres"}:
            raise ValueError(f"Invalid database engine: {v}")
        return v_lower

    @property
    def allowed_hosts_list(self) -> List[str]:
        return [host.strip() for host in self.allowed_hosts.split(",") if host.strip()]

    def database_config(self, base_dir) -> dict:
        """Build the ``DATABASES['default']`` entry for Django."""
        if self.db_engine == "postgres":
            return {
                "ENGINE": "django.db.backends.postgresql",
                "NAME": self.pg_dbname,
                "USER": self.pg_user,
                "PASSWORD": self.pg_password,
                "HOST": self.pg_host,
                "PORT": str(self.pg_port),
                "OPTIONS": {"sslmode": self.pg_sslmode},
            }
        return {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": str(base_dir / self.sqlite_path),
        }


@lru_cache()
def get_settings() -> Settings:
    return Settings()
