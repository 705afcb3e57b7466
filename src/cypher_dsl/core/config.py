"""Configuration management."""

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Neo4j (execution adapter only)
    neo4j_uri: str = "bolt://localhost:7687"
    neo4j_user: str = "neo4j"
    neo4j_password: SecretStr = SecretStr("password")
    neo4j_database: str | None = Field(default=None, description="Database name, server default when unset")
    query_timeout: float | None = Field(default=None, ge=0, description="Per-query timeout in seconds")

    # Logging
    log_level: str = "INFO"
    log_colors: bool = True
    logfire_enabled: bool = False

    # Builder diagnostics
    warn_on_unbound_parameters: bool = Field(
        default=True,
        description="Log a warning when a rendered placeholder has no supplied value",
    )

    model_config = SettingsConfigDict(
        env_prefix="CYPHER_DSL_",
        env_file=".env",
        extra="ignore",  # Ignore extra fields in .env file
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
