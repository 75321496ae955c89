"""
Centralized Configuration System for TABLEFORGE

Type-safe configuration using Pydantic Settings. Every group reads from the environment
and an optional .env file; ApplicationSettings aggregates the groups.

Features:
- Environment variable binding with defaults
- Hierarchical configuration structure
- Single source of truth for all settings
- Test-friendly reload
"""

import json
import os
from enum import Enum
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env" if not os.getenv("DOCKER_CONTAINER") else None


class Environment(str, Enum):
    """Application environment types"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class EditorSettings(BaseSettings):
    """Edit engine settings"""

    model_config = SettingsConfigDict(
        env_prefix="EDITOR_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    max_reconcile_lines: int = Field(
        default=500,
        ge=1,
        description="Maximum lines accepted by one paste or bulk entry"
    )
    id_field: str = Field(
        default="id",
        description="Identifier column filled in before a bulk save"
    )
    tables_without_id: List[str] = Field(
        default_factory=lambda: ["employees"],
        description="Tables whose identifier column is stripped before a bulk save (JSON array)"
    )
    empty_cell_value: str = Field(
        default="",
        description="Value written into new rows and back-filled columns"
    )
    schema_source: Literal["first_row", "infer"] = Field(
        default="first_row",
        description="first_row: data[0] is the schema map; infer: derive types from the rows"
    )
    inference_mode: Literal["heuristic", "sniff"] = Field(
        default="sniff",
        description="Column type inference strategy"
    )


class TableApiSettings(BaseSettings):
    """Remote table API settings"""

    model_config = SettingsConfigDict(
        env_prefix="TABLE_API_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    base_url: str = Field(
        default="http://localhost:8000",
        description="Table API base URL"
    )
    timeout: float = Field(
        default=30.0,
        description="Request timeout in seconds"
    )
    fetch_limit: int = Field(
        default=1000,
        ge=1,
        description="Page size used when fetching table data"
    )


class ServiceSettings(BaseSettings):
    """Service configuration settings"""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    grid_editor_host: str = Field(
        default="0.0.0.0",
        description="Grid editor service host"
    )
    grid_editor_port: int = Field(
        default=8004,
        description="Grid editor service port"
    )

    # CORS Configuration
    cors_enabled: bool = Field(
        default=True,
        description="Enable CORS"
    )
    cors_origins: str = Field(
        default='["http://localhost:3000", "http://localhost:5173", "http://localhost:8080"]',
        description="CORS allowed origins (JSON array string)"
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from JSON string"""
        try:
            return json.loads(self.cors_origins)
        except (json.JSONDecodeError, TypeError):
            return ["*"]


class ApplicationSettings(BaseSettings):
    """Main application settings - aggregates all other settings"""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )

    # Nested settings
    editor: EditorSettings = Field(default_factory=EditorSettings)
    table_api: TableApiSettings = Field(default_factory=TableApiSettings)
    services: ServiceSettings = Field(default_factory=ServiceSettings)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode"""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode"""
        return self.environment == Environment.PRODUCTION

    @property
    def is_test(self) -> bool:
        """Check if running in test mode"""
        return self.environment == Environment.TEST


settings = ApplicationSettings()


def get_settings() -> ApplicationSettings:
    """
    Get the global settings instance

    Usable with FastAPI's Depends() for dependency injection.

    Returns:
        ApplicationSettings: The global settings instance
    """
    return settings


def reload_settings() -> ApplicationSettings:
    """
    Reload settings from environment (useful for testing)

    Returns:
        ApplicationSettings: New settings instance with reloaded values
    """
    global settings
    settings = ApplicationSettings()
    return settings
