"""Project enums."""

from __future__ import annotations

from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value)
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class ValueEnvironment(_EnumMixin):
    """Where the value of an extraction point lives on the page."""

    TEXT = "text"
    TEXTS = "texts"
    TABLE = "table"


class PatternRange(_EnumMixin):
    """Text range searched by pattern-based extraction."""

    LINE = "line"
    CONTEXT = "context"


class RelativePosition(_EnumMixin):
    """Position of a value relative to its key."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    MIDDLE = "middle"
    AT_MIDDLE = "@middle"
    AROUND = "around"
    RIGHT_ALL = "right_all"
    DOWN_FIRST = "down_first"


class ValueType(_EnumMixin):
    """Kind of value produced for an extraction point."""

    STRING = "string"
    IMG = "img"


class ProcessingGroup(_EnumMixin):
    """Algorithm family an extraction point is routed to."""

    MULTIPAGE_TEXT_STRING_LM_PATTERN = "multipage_text_string_lm_pattern"
    MULTIPAGE_TEXT_LINE_STRING = "multipage_text_line_string"
    MULTIPAGE_TEXT_LINES_STRING = "multipage_text_lines_string"
    MULTIPAGE_TEXT_LINE_STRING_NB = "multipage_text_line_string_nb"
    MULTIPAGE_TEXT_CONTEXT_STRING = "multipage_text_context_string"
    MULTIPAGE_TEXT_IMG = "multipage_text_img"
    MULTIPAGE_TEXT_IMGS = "multipage_text_imgs"
    MULTIPAGE_TEXT_IMG_NB = "multipage_text_img_nb"
    MULTIPAGE_RIGHT_TABLE_STRING = "multipage_right_table_string"
    MULTIPAGE_RIGHT_TABLE_ALL_STRING = "multipage_right_table_all_string"
    AROUND_TEXT_IMG = "around_text_img"
    MULTIPAGE_DOWN_TABLE_STRING = "multipage_down_table_string"
    MULTIPAGE_DOWN_TABLE_STRING_CELL = "multipage_down_table_string_cell"
    MULTIPAGE_DOWN_TABLE_STRING_CELL_NB = "multipage_down_table_string_cell_nb"
    MULTIPAGE_DOWN_TABLE_STRING_CROSS_CELL = "multipage_down_table_string_cross_cell"
    MULTIPAGE_DOWN_TABLE_STRING_CELL_NB_TEXT = "multipage_down_table_string_cell_nb_text"
    MULTIPAGE_UP_DOWN_LEFT_RIGHT_TABLE_IMG = "multipage_up_down_left_right_table_img"
    MULTIPAGE_RIGHT_NB_TABLE_STRING = "multipage_right_nb_table_string"
    MULTIPAGE_RIGHT_NB_TABLE_STRING_VALUE = "multipage_right_nb_table_string_value"
