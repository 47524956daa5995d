"""Viewport arithmetic for scrolling lists."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScrollWindow:
    """Clamped selection and offset plus the half-open visible range."""

    selected: int
    offset: int
    start: int
    end: int


def compute_scroll_window(selected: int, offset: int, count: int, height: int) -> ScrollWindow:
    """Clamp ``selected`` and ``offset`` so the selection sits inside the viewport.

    The result satisfies ``0 <= offset <= max(0, count - height)`` and
    ``offset <= selected < offset + height`` whenever ``count > 0``. Feeding
    the result back in returns it unchanged.
    """

    if height < 1:
        raise ValueError("viewport height must be at least 1")
    if count <= 0:
        return ScrollWindow(0, 0, 0, 0)

    selected = min(max(selected, 0), count - 1)

    if selected < offset:
        offset = selected
    elif selected >= offset + height:
        offset = selected - height + 1

    max_offset = max(0, count - height)
    offset = min(max(offset, 0), max_offset)

    return ScrollWindow(selected, offset, offset, min(offset + height, count))


__all__ = ["ScrollWindow", "compute_scroll_window"]
