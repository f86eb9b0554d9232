"""Checkpoint configuration models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

RatioBox = tuple[tuple[float, float], tuple[float, float]]


class ExtractionPoint(BaseModel):
    """One configured target field and how to locate its value."""

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    document_field: str
    page: int | None = None
    value_environment: str | None = None
    text_string_pattern_range: str | None = None
    key_value_relative_position: str | None = None
    value_type: str | None = None
    alias: tuple[str, ...] = Field(default_factory=tuple)
    sign_seal_id: str | None = None
    location: RatioBox | None = Field(
        default=None,
        description="Relative ratio box, as [[row, col], [row, col]] fractions of the page.",
    )

    @property
    def first_alias(self) -> str | None:
        """Return the first alias, which carries positional markers."""
        return self.alias[0] if self.alias else None


class CheckpointConfig(BaseModel):
    """Extraction points configured for one form type."""

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    form_type_id: str
    extract_point: tuple[ExtractionPoint, ...] = Field(default_factory=tuple)
    multi_page: bool = True
