"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class AsyncExecutionError(PackageError):
    """Raised when an async operation fails in compatibility runner."""

    result: BaseException
    message: str = "Async operation failed"

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.result}"


@dataclass(frozen=True)
class DependencyError(PackageError):
    """Raised when optional runtime dependencies are missing."""

    missing_package: list[str]
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Missing runtime dependencies for '{self.message}': {', '.join(self.missing_package)}"


@dataclass(frozen=True)
class ResolverRegistryError(PackageError):
    """Raised when the resolver registry cannot be built."""

    message: str = "No resolver available"

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class MissingOcrResultError(PackageError):
    """Raised when an image selected for an extraction point has no OCR output."""

    image_id: str
    form_type_id: str | None = None
    document_field: str | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return (
            f"OCR result missing for image '{self.image_id}' "
            f"(form type '{self.form_type_id}', field '{self.document_field}')"
        )


@dataclass
class CheckpointStoreError(PackageError):
    """Raised when checkpoint configuration files cannot be loaded or saved."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class GeometryError(PackageError):
    """Raised when a relative ratio box is malformed."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message
