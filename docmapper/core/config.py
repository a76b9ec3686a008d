# ==============================================
# docmapper/core/config.py
# ==============================================
from typing import List, Optional
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    url: str = Field(default="sqlite:///./docmapper.db")
    echo: bool = Field(default=False)

    model_config = SettingsConfigDict(env_prefix="DATABASE_", extra="ignore")


class LoggingSettings(BaseSettings):
    level: str = Field(default="INFO")
    json_format: bool = Field(default=False)
    format: str = Field(default="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    file_path: Optional[str] = Field(default=None)
    max_bytes: int = Field(default=10 * 1024 * 1024)
    backup_count: int = Field(default=5)

    model_config = SettingsConfigDict(env_prefix="LOG_", extra="ignore")


class MappingSettings(BaseSettings):
    """Mapping engine configuration settings."""

    error_trail_max_length: int = Field(default=1000)
    date_format: str = Field(default="%Y-%m-%d")
    time_format: str = Field(default="%H:%M:%S")
    datetime_format: str = Field(default="%Y-%m-%dT%H:%M:%S")
    decimal_places: int = Field(default=3)
    currency_places: int = Field(default=2)

    # Line discovery
    fallback_line_discovery: bool = Field(default=True)
    line_group_patterns: List[str] = Field(default=[
        "//Items/Item",
        "//tns:Items/tns:Item",
        "//*[local-name()='Items']/*[local-name()='Item']",
        "//Lines/Line",
        "//tns:Lines/tns:Line",
        "//*[local-name()='Lines']/*[local-name()='Line']",
        "//Details/Detail",
        "//tns:Details/tns:Detail",
        "//*[local-name()='Details']/*[local-name()='Detail']",
    ])
    default_namespace_prefix: str = Field(default="default")

    audit_source: str = Field(default="DOCMAPPER")

    model_config = SettingsConfigDict(env_prefix="MAPPING_", extra="ignore")


class Settings(BaseSettings):
    app_name: str = Field(default="docmapper")
    environment: str = Field(default="development")

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    mapping: MappingSettings = Field(default_factory=MappingSettings)

    model_config = SettingsConfigDict(env_file=".env", extra="allow", env_file_encoding="utf-8")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()
