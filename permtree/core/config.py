from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_name: str = "permtree"

    # Storage
    storage_backend: str = "sql"  # "sql" or "memory"
    database_url: str = "sqlite:///permtree.db"
    database_echo: bool = False

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = False

    # Optional catalog applied by seed_from_settings()
    catalog_path: str = ""

    model_config = SettingsConfigDict(
        env_prefix="PERMTREE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"  # Allow extra env vars without raising validation errors
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
