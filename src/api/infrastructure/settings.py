"""Configuration for the customer API, loaded with pydantic-settings.

Each section reads its own ``CUSTOMER_API_*`` prefix from the environment or
a ``.env`` file. Defaults target a local development stack.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_config(prefix: str) -> SettingsConfigDict:
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class DatabaseSettings(BaseSettings):
    """PostgreSQL connection settings (``CUSTOMER_API_DB_*``).

    The write engine holds ``pool_max_connections``; the read engine keeps
    ``pool_min_connections`` open and overflows up to the maximum.
    """

    model_config = _env_config("CUSTOMER_API_DB_")

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="customers", description="Database name")
    username: str = Field(default="customers", description="Database username")
    password: SecretStr = Field(default=SecretStr(""), description="Database password")
    pool_min_connections: int = Field(default=2, ge=1, le=100)
    pool_max_connections: int = Field(default=10, ge=1, le=100)

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Connection target for log events; never includes the password."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class SearchGuardSettings(BaseSettings):
    """SearchGuard roles API settings (``CUSTOMER_API_SEARCHGUARD_*``).

    ``role_name`` is the role whose tenant mapping mirrors the customer
    table; it defaults to ``lagoonadmin``.
    """

    model_config = _env_config("CUSTOMER_API_SEARCHGUARD_")

    url: str = Field(
        default="http://localhost:9200",
        description="Base URL of the SearchGuard-enabled Elasticsearch node",
    )
    username: str = Field(default="admin", description="Basic auth username")
    password: SecretStr = Field(default=SecretStr(""), description="Basic auth password")
    role_name: str = Field(default="lagoonadmin", min_length=1)
    timeout_seconds: float = Field(default=10.0, gt=0, le=300)
    verify_tls: bool = Field(default=True, description="Verify TLS certificates")


class Settings(BaseSettings):
    """Process-level settings (``CUSTOMER_API_*``)."""

    model_config = _env_config("CUSTOMER_API_")

    debug: bool = Field(default=False, description="Emit debug-level probe events")


@lru_cache
def get_settings() -> Settings:
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    return DatabaseSettings()


@lru_cache
def get_searchguard_settings() -> SearchGuardSettings:
    return SearchGuardSettings()
