"""Typing-centric domain modules."""

from extractpoints.typing.enums import (
    PatternRange,
    ProcessingGroup,
    RelativePosition,
    ValueEnvironment,
    ValueType,
)
from extractpoints.typing.models import (
    Box,
    CheckpointConfig,
    Content,
    CorrectedImage,
    ExtractedField,
    ExtractionPoint,
    Image,
    OcrOutput,
    RatioBox,
    ResolveContext,
    Shape,
)
from extractpoints.typing.protocol import Resolver

__all__ = [
    "Box",
    "CheckpointConfig",
    "Content",
    "CorrectedImage",
    "ExtractedField",
    "ExtractionPoint",
    "Image",
    "OcrOutput",
    "PatternRange",
    "ProcessingGroup",
    "RatioBox",
    "RelativePosition",
    "ResolveContext",
    "Resolver",
    "Shape",
    "ValueEnvironment",
    "ValueType",
]
