"""Rule-based routing of extraction points to processing groups.

Each point is reduced to a fixed set of boolean predicates over its attributes,
then every rule of ``GROUP_RULES`` is evaluated independently. A point lands in
each group whose rule holds, so it may belong to no group or to several.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from extractpoints.typing.enums import (
    PatternRange,
    ProcessingGroup,
    RelativePosition,
    ValueEnvironment,
    ValueType,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from extractpoints.typing.models import ExtractionPoint

SEAL_SIGN_SEAL_ID = "19"

_POSITIONS_FOUR = frozenset(
    position.value
    for position in (
        RelativePosition.UP,
        RelativePosition.DOWN,
        RelativePosition.LEFT,
        RelativePosition.RIGHT,
    )
)
_POSITIONS_SIX = _POSITIONS_FOUR | {RelativePosition.MIDDLE.value, RelativePosition.AT_MIDDLE.value}
_POSITIONS_DOWN = frozenset((RelativePosition.DOWN.value, RelativePosition.DOWN_FIRST.value))


@dataclass(frozen=True, slots=True)
class PointTraits:
    """Boolean predicates derived from one extraction point."""

    multi_page: bool
    text: bool
    texts: bool
    table: bool
    line: bool
    context: bool
    position6: bool
    right: bool
    right_all: bool
    around: bool
    down: bool
    down2: bool
    position4: bool
    string: bool
    img: bool
    nearby: bool
    cell: bool
    cross: bool
    nearby_text: bool
    value_not: bool
    value: bool
    seal: bool

    @classmethod
    def of(cls, point: ExtractionPoint, multi_page: bool) -> PointTraits:  # noqa: FBT001
        """Derive predicates for a point.

        Alias predicates only look at the first alias and are all false when
        the point has no alias.

        Args:
            point (ExtractionPoint): Extraction point.
            multi_page (bool): Whether the form type spans several pages.

        Returns:
            PointTraits: Derived predicates.
        """
        environment = point.value_environment
        pattern_range = point.text_string_pattern_range
        position = point.key_value_relative_position
        alias = point.first_alias
        has_alias = alias is not None

        return cls(
            multi_page=bool(multi_page),
            text=environment == ValueEnvironment.TEXT,
            texts=environment == ValueEnvironment.TEXTS,
            table=environment == ValueEnvironment.TABLE,
            line=pattern_range == PatternRange.LINE,
            context=pattern_range == PatternRange.CONTEXT,
            position6=position in _POSITIONS_SIX,
            right=position == RelativePosition.RIGHT,
            right_all=position == RelativePosition.RIGHT_ALL,
            around=position == RelativePosition.AROUND,
            down=position == RelativePosition.DOWN,
            down2=position in _POSITIONS_DOWN,
            position4=position in _POSITIONS_FOUR,
            string=point.value_type == ValueType.STRING,
            img=point.value_type == ValueType.IMG,
            nearby=has_alias and "@" in alias,
            cell=has_alias and alias.startswith("@"),
            cross=has_alias and alias.startswith("&"),
            nearby_text=has_alias and "_text@" in alias,
            value_not=has_alias and "_value@" not in alias,
            value=has_alias and "_value@" in alias,
            seal=point.sign_seal_id == SEAL_SIGN_SEAL_ID,
        )


Rule = tuple[ProcessingGroup, Callable[[PointTraits], bool]]

# Order drives output order only; every rule is evaluated.
GROUP_RULES: tuple[Rule, ...] = (
    (
        ProcessingGroup.MULTIPAGE_TEXT_STRING_LM_PATTERN,
        lambda t: t.text and t.seal and t.string and t.multi_page,
    ),
    (
        ProcessingGroup.MULTIPAGE_TEXT_LINE_STRING,
        lambda t: t.text and t.line and t.string and t.multi_page and not t.nearby and not t.seal,
    ),
    (
        ProcessingGroup.MULTIPAGE_TEXT_LINES_STRING,
        lambda t: t.texts and t.line and t.string and t.multi_page and not t.nearby and not t.seal,
    ),
    (
        ProcessingGroup.MULTIPAGE_TEXT_LINE_STRING_NB,
        lambda t: t.text and t.line and t.string and t.multi_page and t.nearby,
    ),
    (
        ProcessingGroup.MULTIPAGE_TEXT_CONTEXT_STRING,
        lambda t: t.text and t.context and t.string and t.multi_page and not t.nearby,
    ),
    (
        ProcessingGroup.MULTIPAGE_TEXT_IMG,
        lambda t: t.text and t.position6 and t.img and t.multi_page and not t.nearby,
    ),
    (
        ProcessingGroup.MULTIPAGE_TEXT_IMGS,
        lambda t: t.texts and t.position6 and t.img and t.multi_page and not t.nearby,
    ),
    (
        ProcessingGroup.MULTIPAGE_TEXT_IMG_NB,
        lambda t: t.text and t.position6 and t.img and t.multi_page and t.nearby,
    ),
    (
        ProcessingGroup.MULTIPAGE_RIGHT_TABLE_STRING,
        lambda t: t.table and t.right and t.string and t.multi_page and not t.nearby,
    ),
    (
        ProcessingGroup.MULTIPAGE_RIGHT_TABLE_ALL_STRING,
        lambda t: t.table and t.right_all and t.string and t.multi_page and not t.nearby,
    ),
    (
        ProcessingGroup.AROUND_TEXT_IMG,
        lambda t: t.text and t.around and t.img and t.multi_page,
    ),
    (
        ProcessingGroup.MULTIPAGE_DOWN_TABLE_STRING,
        lambda t: t.table and t.down and t.string and t.multi_page and not t.nearby,
    ),
    (
        ProcessingGroup.MULTIPAGE_DOWN_TABLE_STRING_CELL,
        lambda t: t.table and t.down2 and t.string and t.multi_page and t.nearby and t.cell,
    ),
    (
        ProcessingGroup.MULTIPAGE_DOWN_TABLE_STRING_CELL_NB,
        lambda t: (
            t.table and t.down2 and t.string and t.multi_page and t.nearby and not t.cell and not t.nearby_text
        ),
    ),
    (
        ProcessingGroup.MULTIPAGE_DOWN_TABLE_STRING_CROSS_CELL,
        lambda t: t.table and t.down2 and t.string and t.multi_page and t.cross,
    ),
    (
        ProcessingGroup.MULTIPAGE_DOWN_TABLE_STRING_CELL_NB_TEXT,
        lambda t: t.table and t.down2 and t.string and t.multi_page and t.nearby_text,
    ),
    (
        ProcessingGroup.MULTIPAGE_UP_DOWN_LEFT_RIGHT_TABLE_IMG,
        lambda t: t.table and t.position4 and t.img and t.multi_page,
    ),
    # Rules 18 and 19 ignore the multi-page flag.
    (
        ProcessingGroup.MULTIPAGE_RIGHT_NB_TABLE_STRING,
        lambda t: t.table and t.right and t.string and t.value_not and t.nearby,
    ),
    (
        ProcessingGroup.MULTIPAGE_RIGHT_NB_TABLE_STRING_VALUE,
        lambda t: t.table and t.right and t.string and t.value,
    ),
)


def classify(point: ExtractionPoint, multi_page: bool) -> list[ProcessingGroup]:  # noqa: FBT001
    """Return every processing group the extraction point belongs to.

    Args:
        point (ExtractionPoint): Extraction point to classify.
        multi_page (bool): Whether the form type spans several pages.

    Returns:
        list[ProcessingGroup]: Matching groups, in rule table order.
    """
    traits = PointTraits.of(point, multi_page)
    return [group for group, rule in GROUP_RULES if rule(traits)]


def divide_into_groups(
    points: Iterable[ExtractionPoint],
    multi_page: bool,  # noqa: FBT001
) -> dict[ProcessingGroup, list[ExtractionPoint]]:
    """Batch extraction points by processing group.

    A point is listed under every group it belongs to; points without any group
    are left out.

    Args:
        points (Iterable[ExtractionPoint]): Points in configuration order.
        multi_page (bool): Whether the form type spans several pages.

    Returns:
        dict[ProcessingGroup, list[ExtractionPoint]]: Points per group, groups in first-seen order.
    """
    groups: dict[ProcessingGroup, list[ExtractionPoint]] = {}
    for point in points:
        for group in classify(point, multi_page):
            groups.setdefault(group, []).append(point)
    return groups
