# Fichier : langobridge_admin/utils/virtualization.py
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Dict, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

TABLET_BREAKPOINT = 768
DESKTOP_BREAKPOINT = 1024


@dataclass(frozen=True)
class ListLayout:
    row_height: int
    overscan: int
    responsive: bool


# Estimated row/card heights per screen
VOCABULARY_LAYOUT = ListLayout(row_height=64, overscan=10, responsive=False)
RESOURCE_LAYOUT = ListLayout(row_height=200, overscan=3, responsive=True)
BLOG_LAYOUT = ListLayout(row_height=400, overscan=3, responsive=True)


@dataclass(frozen=True)
class VirtualWindow:
    columns: int
    row_count: int
    first_row: int
    last_row: int
    item_start: int
    item_end: int
    offset_top: int
    total_height: int

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


def columns_for_width(width: int) -> int:
    if width >= DESKTOP_BREAKPOINT:
        return 3
    if width >= TABLET_BREAKPOINT:
        return 2
    return 1


def compute_window(
    item_count: int,
    *,
    columns: int,
    row_height: int,
    overscan: int,
    scroll_offset: int,
    viewport_height: int,
) -> VirtualWindow:
    """Rows intersecting ``[scroll_offset, scroll_offset + viewport_height)`` plus overscan.

    ``last_row`` and ``item_end`` are exclusive; an empty list yields an empty window.
    """

    columns = max(1, columns)
    row_count = math.ceil(item_count / columns) if item_count > 0 else 0
    total_height = row_count * row_height
    if row_count == 0:
        return VirtualWindow(columns, 0, 0, 0, 0, 0, 0, 0)

    scroll_offset = min(max(0, scroll_offset), max(0, total_height - 1))
    visible_first = scroll_offset // row_height
    visible_last = math.ceil((scroll_offset + max(0, viewport_height)) / row_height)

    first_row = max(0, visible_first - overscan)
    last_row = min(row_count, max(visible_last, visible_first + 1) + overscan)

    return VirtualWindow(
        columns=columns,
        row_count=row_count,
        first_row=first_row,
        last_row=last_row,
        item_start=first_row * columns,
        item_end=min(item_count, last_row * columns),
        offset_top=first_row * row_height,
        total_height=total_height,
    )


def window_items(
    items: Sequence[T],
    layout: ListLayout,
    *,
    width: Optional[int] = None,
    scroll_top: Optional[int] = None,
    viewport_height: Optional[int] = None,
) -> Tuple[Sequence[T], Optional[VirtualWindow]]:
    """Slice ``items`` to the rendered window; untouched when no viewport is given."""

    if viewport_height is None:
        return items, None

    columns = columns_for_width(width or 0) if layout.responsive else 1
    window = compute_window(
        len(items),
        columns=columns,
        row_height=layout.row_height,
        overscan=layout.overscan,
        scroll_offset=scroll_top or 0,
        viewport_height=viewport_height,
    )
    return items[window.item_start : window.item_end], window
