"""
FastAPI Configuration Management

Settings for the component store, the workflow script generator and the
sandboxed code runner, loaded from environment variables and `.env`.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.utils.logging_utils import setup_universal_logging


class Settings(BaseSettings):
    """
    Application settings with automatic environment variable loading.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    # === CORE APPLICATION METADATA ===
    APP_NAME: str = "Stagecraft"
    APP_VERSION: str = "0.1.0"
    APP_SUMMARY: str = "Component store and pipeline script generator."
    APP_DESCRIPTION: str = (
        "Manage stage-tagged code components, run them in a sandbox and export "
        "workflows as standalone Python pipeline scripts."
    )
    DEBUG: bool = False
    TESTING: bool = False

    # Server configuration
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    WORKERS: int = 1

    # CORS and security
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8080"]
    ALLOWED_HOSTS: List[str] = ["localhost", "127.0.0.1"]
    API_DOCS_ENABLED: Optional[bool] = None
    API_PREFIX: str = "/api/v1"

    # === DATABASE CONFIGURATION ===
    DATABASE_URL: str = "sqlite+aiosqlite:///./stagecraft.db"
    DB_ECHO: bool = False  # Set to True for SQL query logging
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # === SANDBOX EXECUTION ===
    SANDBOX_DOCKER_IMAGE: str = "python:3.11-slim"
    SANDBOX_WORK_DIR: str = "/tmp/code_execution"
    SANDBOX_MEMORY_LIMIT: str = "2g"
    SANDBOX_CPU_LIMIT: str = "2"
    SANDBOX_NETWORK: str = "none"
    # None means wait for the container however long it runs
    SANDBOX_TIMEOUT_SECONDS: Optional[float] = None

    # === SCRIPT EXPORT ===
    SCRIPT_EXPORT_FILENAME: str = "pipeline.py"

    # === LOGGING ===
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/stagecraft.log"
    LOG_MAX_SIZE: int = 50 * 1024 * 1024  # 50MB
    LOG_BACKUP_COUNT: int = 10
    # "size" or "time"
    LOG_ROTATION_TYPE: str = "size"
    LOG_ROTATION_WHEN: Optional[str] = "midnight"
    LOG_ROTATION_INTERVAL: int = 1
    LOG_CONSOLE_LEVEL: str = "WARNING"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("ALLOWED_HOSTS", mode="before")
    @classmethod
    def parse_allowed_hosts(cls, v):
        if isinstance(v, str):
            return [host.strip() for host in v.split(",")]
        return v

    @field_validator("SANDBOX_TIMEOUT_SECONDS", mode="before")
    @classmethod
    def parse_optional_timeout(cls, v):
        if isinstance(v, str) and v.strip().lower() in {"", "none", "null", "unlimited"}:
            return None
        return v

    @field_validator("SANDBOX_TIMEOUT_SECONDS")
    @classmethod
    def validate_timeout(cls, v):
        if v is not None and v <= 0:
            raise ValueError("SANDBOX_TIMEOUT_SECONDS must be positive")
        return v

    @model_validator(mode="after")
    def validate_export_filename(self):
        """Exported scripts are always Python files."""
        if not self.SCRIPT_EXPORT_FILENAME.endswith(".py"):
            self.SCRIPT_EXPORT_FILENAME = f"{self.SCRIPT_EXPORT_FILENAME}.py"
        return self

    def create_directories(self) -> None:
        """Create all necessary directories if they don't exist."""
        for directory in (Path(self.LOG_FILE).parent, Path(self.SANDBOX_WORK_DIR)):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                print(f"Warning: Could not create directory {directory}: {e}")

    def setup_logging(self) -> None:
        """Initialize application logging."""
        setup_universal_logging(
            log_file=self.LOG_FILE,
            log_level=self.LOG_LEVEL,
            rotation_type=self.LOG_ROTATION_TYPE,
            rotation_when=self.LOG_ROTATION_WHEN,
            rotation_interval=self.LOG_ROTATION_INTERVAL,
            max_bytes=self.LOG_MAX_SIZE,
            backup_count=self.LOG_BACKUP_COUNT,
            console_log_level=self.LOG_CONSOLE_LEVEL,
        )


class DevelopmentSettings(Settings):
    """Development environment settings."""
    DEBUG: bool = True
    LOG_LEVEL: str = "DEBUG"
    HOST: str = "0.0.0.0"  # Allow external connections in dev
    CORS_ORIGINS: List[str] = ["*"]  # Allow all origins in development

    def init_dev_features(self) -> None:
        """Initialize development-specific features."""
        self.setup_logging()
        print("Running in DEVELOPMENT mode")


class ProductionSettings(Settings):
    """Production environment settings."""
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    DB_ECHO: bool = False

    def init_production_features(self) -> None:
        """Initialize production-specific features."""
        self.setup_logging()
        print("Running in PRODUCTION mode")


class TestingSettings(Settings):
    """Testing environment settings."""
    TESTING: bool = True
    DEBUG: bool = True
    DATABASE_URL: str = "sqlite+aiosqlite:///:memory:"
    LOG_LEVEL: str = "DEBUG"
    LOG_FILE: str = "logs/stagecraft_test.log"
    ALLOWED_HOSTS: List[str] = ["localhost", "127.0.0.1", "testserver"]

    def init_test_features(self) -> None:
        """Initialize testing-specific features."""
        self.setup_logging()
        print("🧪 Running in TESTING mode")


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings based on environment.
    Uses lru_cache to avoid recreating settings on every call.
    """
    env = os.getenv("FASTAPI_ENV", "development").lower()

    if env == "production":
        production_settings = ProductionSettings()
        production_settings.init_production_features()
        settings: Settings = production_settings
    elif env == "testing":
        testing_settings = TestingSettings()
        testing_settings.init_test_features()
        settings = testing_settings
    else:
        development_settings = DevelopmentSettings()
        development_settings.init_dev_features()
        settings = development_settings

    # Create necessary directories
    settings.create_directories()

    return settings
