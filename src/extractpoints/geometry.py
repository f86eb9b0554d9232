"""Relative-to-absolute image coordinate helpers."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

try:
    import fitz
except Exception:  # pragma: no cover - optional dependency at runtime
    fitz: Any
    fitz = None

from extractpoints.dependencies import ensure_image_dependencies
from extractpoints.exceptions import GeometryError
from extractpoints.typing.models import Box, Shape

if TYPE_CHECKING:
    from pathlib import Path

_ONE = Decimal(1)


def _scale(ratio: object, size: int) -> int:
    """Scale a ratio by a pixel size and round half-up.

    Args:
        ratio (object): Fraction as a number or numeric string.
        size (int): Pixel size of the matching axis.

    Raises:
        GeometryError: If the ratio is not numeric.

    Returns:
        int: Rounded pixel coordinate.
    """
    try:
        # str() keeps the shortest decimal form of floats, so 0.15 stays 0.15
        value = ratio if isinstance(ratio, Decimal) else Decimal(str(ratio))
        return int((value * size).quantize(_ONE, rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError) as exc:
        raise GeometryError(message=f"Invalid ratio value: {ratio!r}") from exc


def absolute_box(
    height: int,
    width: int,
    ratio: Sequence[Sequence[object]] | None = None,
) -> Box:
    """Convert a relative ratio box into an absolute pixel box.

    Ratios are given as ``[[row, col], [row, col]]`` fractions of the image;
    rows scale with ``height`` and columns with ``width``. Without a ratio box
    the whole image minus a one pixel border is returned.

    Args:
        height (int): Image height in pixels.
        width (int): Image width in pixels.
        ratio (Sequence[Sequence[object]] | None): Optional relative box.

    Raises:
        GeometryError: If the ratio box does not hold two (row, col) pairs.

    Returns:
        Box: Absolute box with (row, col) corners.
    """
    if not ratio:
        return Box(top_left=(1, 1), bottom_right=(height - 1, width - 1))

    if len(ratio) != 2 or any(not isinstance(corner, Sequence) or len(corner) != 2 for corner in ratio):  # noqa: PLR2004
        raise GeometryError(message=f"Ratio box must hold two (row, col) pairs, got {ratio!r}")

    (top, left), (bottom, right) = ratio
    return Box(
        top_left=(_scale(top, height), _scale(left, width)),
        bottom_right=(_scale(bottom, height), _scale(right, width)),
    )


def calc_location(shape: Shape, ratio: Sequence[Sequence[object]] | None = None) -> Box:
    """Convert a relative ratio box for an image of the given shape.

    Args:
        shape (Shape): Image dimensions.
        ratio (Sequence[Sequence[object]] | None): Optional relative box.

    Returns:
        Box: Absolute box with (row, col) corners.
    """
    return absolute_box(shape.height, shape.width, ratio)


def read_shape(path: Path) -> Shape:
    """Read the pixel dimensions of an image file.

    Args:
        path (Path): Image file path.

    Raises:
        GeometryError: If the file cannot be decoded.

    Returns:
        Shape: Image width and height.
    """
    ensure_image_dependencies()
    try:
        pixmap = fitz.Pixmap(str(path))
    except Exception as exc:
        raise GeometryError(message=f"Failed to read image: {path}") from exc
    return Shape(width=pixmap.width, height=pixmap.height)
