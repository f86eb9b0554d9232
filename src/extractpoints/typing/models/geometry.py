"""Image geometry models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

Point = tuple[int, int]


class Shape(BaseModel):
    """Pixel dimensions of an image."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    width: int = Field(ge=0)
    height: int = Field(ge=0)


class Box(BaseModel):
    """Absolute pixel box, corners given as (row, col)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    top_left: Point
    bottom_right: Point

    def as_list(self) -> list[list[int]]:
        """Return the box as ``[[row, col], [row, col]]``."""
        return [list(self.top_left), list(self.bottom_right)]
