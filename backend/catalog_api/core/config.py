"""Centralized application settings using pydantic settings."""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
# Look for .env in the backend directory or project root
env_path = Path(__file__).parent.parent.parent / ".env"
if not env_path.exists():
    env_path = Path(__file__).parent.parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path, override=False)


class Settings(BaseSettings):
    """Environment-aware configuration (store credentials, HTTP timeouts)."""

    # Application settings
    app_name: str = "Catalog API"
    log_level: str = "INFO"

    # Store credentials. No defaults: a missing value is an empty component
    # and the store rejects the connection.
    db_host: str = ""
    db_port: str = ""
    db_user: str = ""
    db_password: str = ""
    db_name: str = ""

    db_driver: str = Field(
        default="postgresql+psycopg",
        description="SQLAlchemy driver name used to build the connection URL",
    )
    db_sslmode: str = "disable"
    db_pool_size: int = Field(default=4, ge=1, description="Max open (and idle) connections")
    db_probe_timeout: float = Field(
        default=5.0, description="Seconds to keep probing the store at startup"
    )
    db_retry_interval: float = Field(
        default=1.0, description="Seconds to sleep between liveness probes"
    )
    db_connect_timeout: int = 2
    db_create_schema: bool = Field(
        default=True, description="Create the product table at startup if missing"
    )

    # HTTP server settings
    http_host: str = "0.0.0.0"
    http_port: int = 8080
    idle_timeout: float = Field(
        default=15.0, description="Seconds an idle keep-alive connection is kept open"
    )
    shutdown_timeout: float = Field(
        default=10.0, description="Seconds allowed for draining requests on shutdown"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str | None) -> str:
        """Accept lower-case level names from the environment."""
        if v is None or not str(v).strip():
            return "INFO"
        return str(v).strip().upper()


@lru_cache
def get_settings() -> Settings:
    """Provide singleton-like access for dependency injection."""
    return Settings()
