"""Extraction result and resolver context models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from extractpoints.typing.models.checkpoint import ExtractionPoint
from extractpoints.typing.models.geometry import Box
from extractpoints.typing.models.image import Image, OcrOutput


class ExtractedField(BaseModel):
    """Single extracted key/value datum."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    key: str
    value: str = ""
    location: Box | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)


class Content(BaseModel):
    """Extraction result for one extraction point."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    image: str = ""
    point: ExtractionPoint
    value_info: list[ExtractedField] = Field(default_factory=list)
    error: str | None = None

    @classmethod
    def of(cls, image: str, point: ExtractionPoint, *, error: str | None = None) -> Content:
        """Build a placeholder content holding the point's default field.

        Args:
            image (str): Image reference, empty when no image matched.
            point (ExtractionPoint): Originating extraction point.
            error (str | None): Optional failure message attached to the point.

        Returns:
            Content: Placeholder content.
        """
        return cls(
            image=image,
            point=point,
            value_info=[ExtractedField(key=point.document_field)],
            error=error,
        )


class ResolveContext(BaseModel):
    """Inputs handed to a resolver for one image of one extraction point."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    image: Image
    ocr: OcrOutput
    point: ExtractionPoint
    images: tuple[Image, ...]
    form_type_id: str
