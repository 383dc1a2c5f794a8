"""Examiner configuration backed by pydantic-settings.

Lookup order for every value:
1. process environment
2. the env file named by EXAMINER_ENV_FILE
3. config/.env.dev, then config/.env (first one found)
4. the defaults declared below
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

ENV_FILE_VARIABLE = "EXAMINER_ENV_FILE"


def _project_root() -> Path:
    """Nearest ancestor holding a config/ directory or a pyproject.toml."""
    here = Path(__file__).resolve()
    for candidate in here.parents:
        if (candidate / "config").is_dir() or (candidate / "pyproject.toml").is_file():
            return candidate
    return here.parents[2]


def get_config_dir() -> Path:
    return _project_root() / "config"


def _env_file_candidates() -> Iterator[Path]:
    explicit = os.environ.get(ENV_FILE_VARIABLE)
    if explicit:
        path = Path(explicit)
        yield path if path.is_absolute() else _project_root() / path

    yield get_config_dir() / ".env.dev"
    yield get_config_dir() / ".env"


def _env_file() -> Path | None:
    return next((p for p in _env_file_candidates() if p.is_file()), None)


class Settings(BaseSettings):
    """Runtime configuration for the credential service and its CLI.

    Only ``jwt_secret_key`` has no default; everything else can be
    overridden through the environment (field name, case-insensitive).
    """

    model_config = SettingsConfigDict(
        env_file=_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Token signing
    jwt_secret_key: SecretStr
    jwt_access_token_expire_minutes: int = Field(default=60, gt=0)

    # bcrypt work factor (4..31)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Verification codes
    verification_code_ttl_seconds: int = Field(default=3600, ge=0)
    verification_code_max_attempts: int = Field(default=5, ge=0)
    verification_code_generation_max_attempts: int = Field(default=100, ge=1)

    # PostgreSQL; DATABASE_DSN wins when set
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "postgres"
    postgres_password: SecretStr | None = None
    postgres_db: str = "examiner"
    database_dsn: str | None = None

    # Outgoing mail
    smtp_enabled: bool = False
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: SecretStr | None = None
    smtp_from_email: str = ""
    smtp_from_name: str = "Examiner"
    smtp_use_tls: bool = True
    smtp_starttls: bool = True
    smtp_timeout_seconds: float = Field(default=10.0, gt=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def database_url(self) -> str:
        """SQLAlchemy URL for the credential store (asyncpg unless overridden)."""
        if self.database_dsn:
            return self.database_dsn

        url = URL.create(
            "postgresql+asyncpg",
            username=self.postgres_user,
            password=(
                self.postgres_password.get_secret_value()
                if self.postgres_password
                else None
            ),
            host=self.postgres_host,
            port=self.postgres_port,
            database=self.postgres_db,
        )
        return url.render_as_string(hide_password=False)


@lru_cache()
def get_settings() -> Settings:
    """Load settings once per process.

    Raises a pydantic ``ValidationError`` when JWT_SECRET_KEY is missing.
    """
    return Settings()  # type: ignore[call-arg]  # values come from the environment


def clear_settings_cache() -> None:
    """Forget the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
