"""Resolver contract helpers and registry."""

from extractpoints.resolvers.base import GroupResolver
from extractpoints.resolvers.registry import DEFAULT_ENTRY_POINT_GROUP, ResolverRegistry

__all__ = ["DEFAULT_ENTRY_POINT_GROUP", "GroupResolver", "ResolverRegistry"]
