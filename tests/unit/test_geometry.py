from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from extractpoints.exceptions import DependencyError, GeometryError
from extractpoints.geometry import absolute_box, calc_location, read_shape
from extractpoints.typing.models import Box, Shape


def test_absolute_box_scales_rows_by_height_and_columns_by_width() -> None:
    box = absolute_box(1000, 2000, [[0.1, 0.2], [0.9, 0.8]])

    assert box == Box(top_left=(100, 400), bottom_right=(900, 1600))


def test_absolute_box_without_ratio_returns_inset_full_image() -> None:
    assert absolute_box(100, 200, None) == Box(top_left=(1, 1), bottom_right=(99, 199))
    assert absolute_box(100, 200, []) == Box(top_left=(1, 1), bottom_right=(99, 199))


def test_absolute_box_rounds_half_up() -> None:
    box = absolute_box(10, 10, [[0.05, 0.15], [0.25, 0.35]])

    assert box.as_list() == [[1, 2], [3, 4]]


def test_absolute_box_accepts_numeric_strings_and_decimals() -> None:
    box = absolute_box(200, 400, [["0.25", Decimal("0.5")], ["0.75", 1]])

    assert box == Box(top_left=(50, 200), bottom_right=(150, 400))


@pytest.mark.parametrize(
    "ratio",
    [
        [[0.1, 0.2]],
        [[0.1, 0.2], [0.3]],
        [[0.1, 0.2], [0.3, 0.4], [0.5, 0.6]],
        [[0.1, 0.2], 0.5],
        [0.1, 0.2],
    ],
)
def test_absolute_box_rejects_malformed_ratio(ratio: list[object]) -> None:
    with pytest.raises(GeometryError, match="two \\(row, col\\) pairs"):
        absolute_box(100, 100, ratio)


def test_absolute_box_rejects_non_numeric_ratio() -> None:
    with pytest.raises(GeometryError, match="Invalid ratio value"):
        absolute_box(100, 100, [["top", 0.2], [0.3, 0.4]])


def test_calc_location_uses_shape_dimensions() -> None:
    shape = Shape(width=200, height=100)

    assert calc_location(shape) == Box(top_left=(1, 1), bottom_right=(99, 199))
    assert calc_location(shape, [[0.5, 0.5], [1, 1]]) == Box(top_left=(50, 100), bottom_right=(100, 200))


def test_read_shape_returns_pixmap_dimensions(monkeypatch, tmp_path: Path) -> None:
    opened: list[str] = []

    class _FakePixmap:
        def __init__(self, path: str) -> None:
            opened.append(path)
            self.width = 640
            self.height = 480

    class _FakeFitz:
        Pixmap = _FakePixmap

    image_path = tmp_path / "page.png"
    monkeypatch.setattr("extractpoints.geometry.ensure_image_dependencies", lambda: None)
    monkeypatch.setattr("extractpoints.geometry.fitz", _FakeFitz)

    assert read_shape(image_path) == Shape(width=640, height=480)
    assert opened == [str(image_path)]


def test_read_shape_wraps_decoding_errors(monkeypatch, tmp_path: Path) -> None:
    class _BrokenFitz:
        @staticmethod
        def Pixmap(path: str) -> None:  # noqa: N802
            raise RuntimeError(f"cannot open {path}")

    monkeypatch.setattr("extractpoints.geometry.ensure_image_dependencies", lambda: None)
    monkeypatch.setattr("extractpoints.geometry.fitz", _BrokenFitz)

    with pytest.raises(GeometryError, match="Failed to read image"):
        read_shape(tmp_path / "broken.png")


def test_read_shape_requires_image_dependencies(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr("extractpoints.dependencies._is_module_available", lambda module_name: False)

    with pytest.raises(DependencyError, match="image shape"):
        read_shape(tmp_path / "page.png")
