"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from extractpoints.exceptions import SettingsError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Settings of an extraction run.

    Every field reads the upper-case environment key given as its alias and can
    also be passed by field name.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    app_env: str = Field(default="dev", validation_alias="APP_ENV")

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Stdlib level name, case-insensitive.",
    )
    log_json: bool = Field(default=True, validation_alias="LOG_JSON")
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="Optional file receiving a copy of the logs.",
    )

    resolver_concurrency: int = Field(
        default=1,
        ge=1,
        validation_alias="RESOLVER_CONCURRENCY",
        description="Maximum number of resolver calls running at once. 1 keeps dispatch sequential.",
    )
    isolate_missing_ocr: bool = Field(
        default=False,
        validation_alias="ISOLATE_MISSING_OCR",
        description="Degrade a missing OCR result to the affected point instead of aborting the run.",
    )
    resolver_entry_point_group: str = Field(
        default="extractpoints.resolvers",
        validation_alias="RESOLVER_ENTRY_POINT_GROUP",
        description="Entry point group scanned for resolver plugins.",
    )

    checkpoint_dir: str = Field(
        default="checkpoints",
        validation_alias="CHECKPOINT_DIR",
        description="Directory holding checkpoint configuration files.",
    )
    results_dir: str = Field(
        default="results",
        validation_alias="RESULTS_DIR",
        description="Directory receiving extraction contents.",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        """Upper-case the level name and reject unknown levels.

        Args:
            value (str): Raw level name.

        Raises:
            ValueError: If the level is not a stdlib logging level.

        Returns:
            str: Upper-cased level name.
        """
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            msg = f"Unknown log level '{value}'"
            raise ValueError(msg)
        return level

    @property
    def checkpoint_path(self) -> Path:
        """Return the checkpoint directory as a path."""
        return Path(self.checkpoint_dir)

    @property
    def results_path(self) -> Path:
        """Return the results directory as a path."""
        return Path(self.results_dir)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings.

    A first failure caused by missing values creates `.env` from
    `.env.template` and loads once more.

    Raises:
        SettingsError: If settings cannot be loaded or validated.

    Returns:
        Settings: The loaded settings instance.
    """
    try:
        return Settings()
    except Exception as exc:
        if not _is_missing_settings_error(exc):
            raise SettingsError(exc=exc) from exc
        ensure_env_file_exists()
        try:
            return Settings()
        except Exception as retry_exc:
            raise SettingsError(exc=retry_exc) from retry_exc


def ensure_env_file_exists(
    *,
    env_path: Path = Path(".env"),
    template_path: Path = Path(".env.template"),
) -> None:
    """Create `.env` from its template when it is missing.

    Args:
        env_path (Path): Target environment file path.
        template_path (Path): Template file path.
    """
    if env_path.exists() or not template_path.exists():
        return
    env_path.write_text(template_path.read_text(encoding="utf-8"), encoding="utf-8")
    logger.info(
        "Created environment file from template",
        extra={"env_path": str(env_path), "template_path": str(template_path)},
    )


def _is_missing_settings_error(exc: Exception) -> bool:
    """Tell whether a settings failure comes from missing values."""
    if not isinstance(exc, ValidationError):
        return False
    return any(error.get("type") == "missing" for error in exc.errors())
