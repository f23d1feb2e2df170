"""
Configuration management for firestore-directives
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROVIDER_NAME = "gcp-firestore"


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="FIRESTORE_DIRECTIVES_",
        case_sensitive=False,
        extra="ignore",
    )

    # Name of the request-context provider entry that carries the store handle
    provider_name: str = DEFAULT_PROVIDER_NAME

    # Resolver-attaching directive names
    fetch_one_directive: str = "getDoc"
    fetch_many_directive: str = "getDocs"

    # Store
    store_backend: str = "firestore"  # 'firestore', 'memory'
    firestore_project_id: str | None = None
    firestore_database: str | None = None
    firestore_credentials_path: str | None = None
    firestore_credentials_json: str | None = None
    seed_path: str | None = None

    # Schema
    schema_path: str | None = None

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8090

    # Environment
    debug: bool = False
    log_level: str = "INFO"


# Global settings instance
settings = Settings()
