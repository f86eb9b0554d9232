"""Merging of per-image extraction results."""

from __future__ import annotations

from functools import reduce
from typing import TYPE_CHECKING

from extractpoints.typing.models import Content

if TYPE_CHECKING:
    from collections.abc import Sequence

    from extractpoints.typing.models import ExtractedField, ExtractionPoint


def _select_field(current: ExtractedField, candidate: ExtractedField) -> ExtractedField:
    """Pick the surviving field when two lists share a key.

    Args:
        current (ExtractedField): Field already accumulated.
        candidate (ExtractedField): Field from the later list.

    Returns:
        ExtractedField: The later field, unless it is blank and the current one is not.
    """
    if not candidate.value.strip() and current.value.strip():
        return current
    return candidate


def merge_fields(left: Sequence[ExtractedField], right: Sequence[ExtractedField]) -> list[ExtractedField]:
    """Merge two ordered field lists keyed by field key.

    Repeated keys are matched by occurrence: the n-th ``right`` field of a key
    replaces the n-th ``left`` field of that key in place (last wins, a blank
    value never erases a filled one). ``right`` fields without a counterpart
    are appended in ``right`` order, so table rows of every image survive.

    Args:
        left (Sequence[ExtractedField]): Accumulated fields.
        right (Sequence[ExtractedField]): Fields to merge in.

    Returns:
        list[ExtractedField]: Merged fields. Inputs are left untouched.
    """
    merged = list(left)
    slots: dict[str, list[int]] = {}
    for index, field in enumerate(merged):
        slots.setdefault(field.key, []).append(index)

    occurrences: dict[str, int] = {}
    for field in right:
        occurrence = occurrences.get(field.key, 0)
        occurrences[field.key] = occurrence + 1
        key_slots = slots.setdefault(field.key, [])
        if occurrence < len(key_slots):
            index = key_slots[occurrence]
            merged[index] = _select_field(merged[index], field)
        else:
            key_slots.append(len(merged))
            merged.append(field)
    return merged


def merge_contents(contents: Sequence[Content], point: ExtractionPoint) -> Content:
    """Fold per-image contents of one extraction point into a single content.

    The first content is the base record; its field list is replaced by the
    left fold of every content's field list.

    Args:
        contents (Sequence[Content]): Per-image contents, in image order.
        point (ExtractionPoint): Extraction point the contents belong to.

    Returns:
        Content: Merged content, or the point's placeholder when ``contents`` is empty.
    """
    if not contents:
        return Content.of("", point)

    fields = reduce(merge_fields, (content.value_info for content in contents[1:]), list(contents[0].value_info))
    return contents[0].model_copy(update={"value_info": fields})
