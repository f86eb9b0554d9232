"""Core domain model exports."""

from extractpoints.typing.models.checkpoint import CheckpointConfig, ExtractionPoint, RatioBox
from extractpoints.typing.models.extraction import Content, ExtractedField, ResolveContext
from extractpoints.typing.models.geometry import Box, Shape
from extractpoints.typing.models.image import CorrectedImage, Image, OcrOutput

__all__ = [
    "Box",
    "CheckpointConfig",
    "Content",
    "CorrectedImage",
    "ExtractedField",
    "ExtractionPoint",
    "Image",
    "OcrOutput",
    "RatioBox",
    "ResolveContext",
    "Shape",
]
