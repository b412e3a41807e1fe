"""
Rectangle packers.

Both packers share one contract: given (id, width, height) rects and a bin
size, place every rect without overlap inside the bin and return
{id: PackedLocation}, or return None if they do not all fit. Results are
deterministic for a fixed input order. There are no partial placements.
"""

from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Optional, Sequence, Tuple

Rect = Tuple[Hashable, int, int]
Placement = Dict[Hashable, "PackedLocation"]


@dataclass(frozen=True)
class PackedLocation:
    """Bin-relative position and size of a packed rect."""
    x: int
    y: int
    width: int
    height: int


@dataclass
class _Section:
    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    def contains(self, width: int, height: int) -> bool:
        return width <= self.width and height <= self.height


class GuillotinePacker:
    """
    Packs rectangles into free sections of a bin, best-area-fit.

    Each rect goes into the smallest free section that can hold it (ties:
    lowest y, then lowest x). The section is then split into the space to
    the right of the rect (rect height) and the space below it (full
    section width).
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.sections: List[_Section] = []
        if width > 0 and height > 0:
            self.sections.append(_Section(0, 0, width, height))

    def pack(self, width: int, height: int) -> Optional[Tuple[int, int]]:
        """Try to pack a rect. Returns (x, y) or None if it does not fit."""
        if width > self.width or height > self.height:
            return None
        # Zero-area rects occupy nothing
        if width == 0 or height == 0:
            return 0, 0

        best = None
        for index, section in enumerate(self.sections):
            if not section.contains(width, height):
                continue
            key = (section.area, section.y, section.x)
            if best is None or key < best[0]:
                best = (key, index)
        if best is None:
            return None

        section = self.sections.pop(best[1])
        right = _Section(section.x + width, section.y, section.width - width, height)
        below = _Section(section.x, section.y + height, section.width, section.height - height)
        self.sections.extend(s for s in (right, below) if s.area > 0)
        return section.x, section.y


class ShelfPacker:
    """Packs rectangles using a greedy shelf algorithm."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.shelves: List[Dict[str, int]] = []

    def pack(self, width: int, height: int) -> Optional[Tuple[int, int]]:
        """Try to pack a rect. Returns (x, y) or None if it does not fit."""
        if width > self.width or height > self.height:
            return None

        # Try existing shelves
        for shelf in self.shelves:
            if width <= self.width - shelf['x'] and height <= shelf['height']:
                x = shelf['x']
                shelf['x'] += width
                return x, shelf['y']

        # New shelf
        new_y = sum(s['height'] for s in self.shelves)
        if new_y + height > self.height:
            return None

        self.shelves.append({'y': new_y, 'height': height, 'x': width})
        return 0, new_y


def _place_all(packer: Any, ordered: Sequence[Rect]) -> Optional[Placement]:
    placements: Placement = {}
    for rect_id, width, height in ordered:
        pos = packer.pack(width, height)
        if pos is None:
            return None
        placements[rect_id] = PackedLocation(pos[0], pos[1], width, height)
    return placements


def pack_rects(rects: Sequence[Rect], bin_size: Sequence[int]) -> Optional[Placement]:
    """
    Pack rectangles into a single bin, largest area first.

    Args:
        rects: (id, width, height) tuples; ids must be unique
        bin_size: (width, height) of the bin

    Returns:
        Dict of id -> PackedLocation, or None if the rects do not all fit
    """
    bin_width, bin_height = bin_size
    # sorted() is stable, so equal areas keep their input order
    ordered = sorted(rects, key=lambda r: r[1] * r[2], reverse=True)
    return _place_all(GuillotinePacker(bin_width, bin_height), ordered)


def pack_rects_shelf(rects: Sequence[Rect], bin_size: Sequence[int]) -> Optional[Placement]:
    """
    Pack rectangles into a single bin on shelves, tallest first.

    Same contract as pack_rects.
    """
    bin_width, bin_height = bin_size
    ordered = sorted(rects, key=lambda r: (r[2], r[1]), reverse=True)
    return _place_all(ShelfPacker(bin_width, bin_height), ordered)
