"""Extraction processing helpers."""

from extractpoints.processing.merge import merge_contents, merge_fields

__all__ = [
    "merge_contents",
    "merge_fields",
]
