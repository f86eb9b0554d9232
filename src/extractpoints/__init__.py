"""ExtractPoints package."""

from extractpoints.async_runner import run_async
from extractpoints.exceptions import (
    AsyncExecutionError,
    CheckpointStoreError,
    DependencyError,
    GeometryError,
    MissingOcrResultError,
    PackageError,
    ResolverRegistryError,
    SettingsError,
)
from extractpoints.logging import configure_logging, get_logger
from extractpoints.settings import Settings, get_settings

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("extractpoints")

__all__ = [
    "AsyncExecutionError",
    "CheckpointStoreError",
    "DependencyError",
    "GeometryError",
    "MissingOcrResultError",
    "PackageError",
    "ResolverRegistryError",
    "Settings",
    "SettingsError",
    "__version__",
    "configure_logging",
    "get_logger",
    "get_settings",
    "logger",
    "run_async",
]
