"""Base class for resolvers routed by processing group."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from extractpoints.classification import classify

if TYPE_CHECKING:
    from extractpoints.typing.enums import ProcessingGroup
    from extractpoints.typing.models import Content, ExtractionPoint, ResolveContext


class GroupResolver(ABC):
    """Resolver supporting the points classified into one of its groups.

    Subclasses declare ``groups`` and implement `resolve`. Support is derived
    from the classification rule table, so resolver selection and point
    grouping always agree.
    """

    groups: ClassVar[frozenset[ProcessingGroup]] = frozenset()
    multi_page: ClassVar[bool] = True

    def support(self, point: ExtractionPoint) -> bool:
        """Return whether the point falls into one of the resolver's groups.

        Args:
            point (ExtractionPoint): Extraction point to test.

        Returns:
            bool: True when at least one classified group is handled here.
        """
        return any(group in self.groups for group in classify(point, self.multi_page))

    @abstractmethod
    def resolve(self, context: ResolveContext) -> Content | None:
        """Extract the point's value from one image.

        Args:
            context (ResolveContext): Image, OCR output and point to resolve.

        Returns:
            Content | None: Populated content, or None when no value was found.
        """

    def __repr__(self) -> str:
        """Return a debug representation listing handled groups."""
        names = ", ".join(sorted(group.value for group in self.groups))
        return f"{type(self).__name__}(groups=[{names}])"
