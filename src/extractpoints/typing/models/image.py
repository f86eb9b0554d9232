"""Classified image and OCR payload models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CorrectedImage(BaseModel):
    """Deskewed copy of a classified image."""

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    url: str | None = None
    rotation_angle: float | None = None
    local_path: str | None = Field(default=None, exclude=True)


class Image(BaseModel):
    """One classified page image produced upstream."""

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    image_id: str
    image_url: str | None = None
    document_name: str | None = None
    document_label: str | None = None
    document_source: int | None = None
    corrected_image_url: str | None = None
    corrected: CorrectedImage | None = None
    document_page: int | None = None
    total_pages: int | None = None
    process_mode: int | None = None
    is_with_title: str | None = None
    classified_path: str | None = Field(default=None, exclude=True)


class OcrOutput(BaseModel):
    """OCR result for one image.

    Only ``image_name`` is interpreted here; every other key of the OCR payload
    is kept untouched for resolvers.
    """

    model_config = ConfigDict(
        extra="allow",
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    image_name: str

    @property
    def payload(self) -> dict[str, Any]:
        """Return the opaque OCR payload."""
        return dict(self.model_extra or {})
