"""Configuration management using Pydantic Settings."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class LeaderboardConfig(BaseModel):
    """Leaderboard sizing."""

    default_limit: Optional[int] = None  # None returns the full standings
    max_limit: int = 500


class Settings(BaseSettings):
    """Application settings loaded from environment variables with validation."""

    # Application Settings
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    allowed_origins: str = Field(
        default="http://localhost:4200",
        description="Comma-separated list of allowed CORS origins"
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Deadline applied to every ledger operation at the HTTP boundary"
    )

    # Database Configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./wagerboard.db",
        description="SQLAlchemy async database URL"
    )
    database_echo: bool = Field(default=False, description="Echo SQL statements")
    auto_create_tables: bool = Field(
        default=True,
        description="Create missing tables at startup"
    )

    # Logging / Observability
    log_level: str = Field(default="INFO", description="Logging level")
    logfire_token: str = Field(default="", description="Logfire observability token")

    # Nested configuration sections
    leaderboard: LeaderboardConfig = Field(default_factory=LeaderboardConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Swap sync driver prefixes for their async equivalents."""
        if v.startswith("sqlite:///"):
            return v.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        if v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    @property
    def origins(self) -> List[str]:
        """Parse comma-separated origins into a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    def load_yaml_config(self, config_path: Path = Path("config.yaml")) -> None:
        """Load and merge YAML configuration sections over the env values."""
        if not config_path.exists():
            logger.debug(f"Config file not found: {config_path}. Using defaults.")
            return

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)

            if not yaml_config:
                logger.warning(f"Empty config file: {config_path}")
                return

            for section_name in ["leaderboard"]:
                if section_name in yaml_config:
                    section = getattr(self, section_name)
                    section_dict = section.model_dump()
                    section_dict.update(yaml_config[section_name])
                    setattr(self, section_name, section.__class__(**section_dict))

            logger.info(f"Loaded configuration from {config_path}")

        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML config: {e}")
            raise


@lru_cache()
def get_settings() -> Settings:
    """Get singleton Settings instance."""
    settings = Settings()
    settings.load_yaml_config()
    return settings
