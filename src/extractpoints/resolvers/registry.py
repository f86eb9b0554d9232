"""Ordered, read-only collection of the available resolvers."""

from __future__ import annotations

from importlib.metadata import entry_points
from typing import TYPE_CHECKING

from extractpoints import logger
from extractpoints.exceptions import ResolverRegistryError
from extractpoints.typing.protocol import Resolver

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from extractpoints.typing.models import ExtractionPoint

DEFAULT_ENTRY_POINT_GROUP = "extractpoints.resolvers"


class ResolverRegistry:
    """Resolvers in registration order.

    The registry is built once at startup and never changes afterwards, so it
    can be shared by concurrent parse runs without locking.
    """

    __slots__ = ("_resolvers",)

    def __init__(self, resolvers: Iterable[Resolver]) -> None:
        """Register resolvers.

        Args:
            resolvers (Iterable[Resolver]): Resolvers, in lookup order.

        Raises:
            ResolverRegistryError: If no resolver is given or an item is not a resolver.
        """
        registered = tuple(resolvers)
        if not registered:
            raise ResolverRegistryError
        invalid = [repr(item) for item in registered if not isinstance(item, Resolver)]
        if invalid:
            raise ResolverRegistryError(message=f"Objects do not implement the resolver interface: {invalid}")
        self._resolvers = registered

    @classmethod
    def from_entry_points(cls, group: str = DEFAULT_ENTRY_POINT_GROUP) -> ResolverRegistry:
        """Discover resolvers published as package entry points.

        Each entry point must reference a resolver class, a zero-argument
        factory, or a resolver instance. Entry points are loaded in name order.

        Args:
            group (str): Entry point group to scan.

        Raises:
            ResolverRegistryError: If an entry point cannot be loaded or none is found.

        Returns:
            ResolverRegistry: Registry holding the discovered resolvers.
        """
        resolvers: list[Resolver] = []
        for entry_point in sorted(entry_points(group=group), key=lambda item: item.name):
            try:
                target = entry_point.load()
                resolver = target if isinstance(target, Resolver) and not isinstance(target, type) else target()
            except Exception as exc:
                raise ResolverRegistryError(
                    message=f"Failed to load resolver entry point '{entry_point.name}': {exc}",
                ) from exc
            resolvers.append(resolver)

        logger.info("Resolvers discovered", extra={"group": group, "count": len(resolvers)})
        return cls(resolvers)

    def find(self, point: ExtractionPoint) -> Resolver | None:
        """Return the first resolver supporting the extraction point.

        Args:
            point (ExtractionPoint): Extraction point to route.

        Returns:
            Resolver | None: First supporting resolver, or None.
        """
        return next((resolver for resolver in self._resolvers if resolver.support(point)), None)

    def __iter__(self) -> Iterator[Resolver]:
        """Iterate resolvers in registration order."""
        return iter(self._resolvers)

    def __len__(self) -> int:
        """Return the number of registered resolvers."""
        return len(self._resolvers)

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"ResolverRegistry({list(self._resolvers)!r})"
