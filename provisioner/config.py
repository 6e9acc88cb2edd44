# provisioner/config.py
from functools import lru_cache
from pathlib import Path

import structlog
from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_BASE_DIR = Path("C:\\automation")


class Settings(BaseSettings):
    # --- Project Layout ---
    BASE_DIR: Path = DEFAULT_BASE_DIR
    PROJECT_NAME: str = "my-service"

    # --- External Tools ---
    PYTHON_EXECUTABLE: str = "python"
    NSSM_EXECUTABLE: str = "nssm"

    # --- Service Definition ---
    SERVICE_DESCRIPTION: str = "Python automation service managed by NSSM."

    # --- Service Log Rotation ---
    LOG_ROTATE_SECONDS: int = Field(86400, gt=0)  # 1 day
    LOG_ROTATE_BYTES: int = Field(1048576, gt=0)  # 1 MiB

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False

    model_config = {"env_file": ".env", "case_sensitive": True}

    @field_validator("PROJECT_NAME", "PYTHON_EXECUTABLE", "NSSM_EXECUTABLE")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level '{value}'")
        return value


@lru_cache()
def get_settings() -> Settings:
    """Loads settings from the environment and the optional .env file."""
    settings = Settings()
    structlog.get_logger(__name__).debug(
        "settings_loaded",
        base_dir=str(settings.BASE_DIR),
        project=settings.PROJECT_NAME,
    )
    return settings
