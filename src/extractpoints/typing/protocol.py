"""Resolver interfaces."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from extractpoints.typing.models import Content, ExtractionPoint, ResolveContext


@runtime_checkable
class Resolver(Protocol):
    """Pluggable algorithm extracting one field's value from an image."""

    def support(self, point: ExtractionPoint) -> bool:
        """Tell whether this resolver handles the extraction point.

        Must be pure and cheap: it is called once per point during lookup.

        Args:
            point: Extraction point to test.

        Returns:
            bool: True when the resolver can extract the point.
        """

    def resolve(self, context: ResolveContext) -> Content | None:
        """Extract the point's value from one image.

        Args:
            context: Image, OCR output, point and shared run parameters.

        Returns:
            Content | None: Populated content, or None when no value was found.
        """
