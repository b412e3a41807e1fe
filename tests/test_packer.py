"""
Tests for the rectangle packers
"""
import itertools

import pytest

from spriteatlas.packing import GuillotinePacker, PackedLocation, ShelfPacker, pack_rects, pack_rects_shelf


def assert_valid_placement(rects, bin_size, placement):
    """Every rect is placed, inside the bin, without overlaps"""
    assert set(placement) == {rect_id for rect_id, _, _ in rects}
    for rect_id, width, height in rects:
        loc = placement[rect_id]
        assert (loc.width, loc.height) == (width, height)
        assert loc.x + loc.width <= bin_size[0]
        assert loc.y + loc.height <= bin_size[1]
    for a, b in itertools.combinations(placement.values(), 2):
        overlap = (
            a.x < b.x + b.width and b.x < a.x + a.width
            and a.y < b.y + b.height and b.y < a.y + a.height
        )
        assert not overlap, f"{a} overlaps {b}"


@pytest.mark.parametrize("packer", [pack_rects, pack_rects_shelf])
class TestPackerContract:
    """Behaviour shared by both packers"""

    def test_no_rects(self, packer):
        """Zero rects always succeed"""
        assert packer([], (0, 0)) == {}

    def test_single_rect_at_origin(self, packer):
        """A lone rect goes to the top-left corner"""
        assert packer([("a", 5, 3)], (8, 8)) == {"a": PackedLocation(0, 0, 5, 3)}

    def test_rect_larger_than_bin(self, packer):
        """A rect bigger than the bin cannot be placed"""
        assert packer([("a", 9, 1)], (8, 8)) is None

    def test_all_or_nothing(self, packer):
        """If one rect does not fit, nothing is returned"""
        rects = [("a", 10, 10), ("b", 10, 10), ("c", 10, 10)]
        assert packer(rects, (20, 10)) is None

    def test_many_rects_do_not_overlap(self, packer):
        """A mixed set of rects is packed without overlaps"""
        rects = [(i, 1 + (i % 5) * 3, 2 + (i % 4) * 3) for i in range(20)]
        placement = packer(rects, (128, 128))
        assert placement is not None
        assert_valid_placement(rects, (128, 128), placement)

    def test_deterministic(self, packer):
        """The same input always gives the same placement"""
        rects = [(i, 3 + i % 7, 2 + i % 3) for i in range(12)]
        assert packer(rects, (32, 32)) == packer(rects, (32, 32))


class TestGuillotinePacking:
    """Test the default best-area-fit packer"""

    def test_largest_first_then_smallest_section(self):
        """The big rect goes first; the small one fills the smaller free section"""
        placement = pack_rects([("small", 2, 2), ("big", 8, 8)], (10, 10))
        assert placement["big"] == PackedLocation(0, 0, 8, 8)
        assert placement["small"] == PackedLocation(8, 0, 2, 2)

    def test_equal_sections_prefer_top(self):
        """Equal rects line up to the right of the first one"""
        placement = pack_rects([(0, 1025, 1025), (1, 1025, 1025)], (2050, 2050))
        assert placement[0] == PackedLocation(0, 0, 1025, 1025)
        assert placement[1] == PackedLocation(1025, 0, 1025, 1025)

    def test_exact_fit(self):
        """Four quarters fill the bin exactly"""
        rects = [(i, 5, 5) for i in range(4)]
        placement = pack_rects(rects, (10, 10))
        assert placement is not None
        assert {(loc.x, loc.y) for loc in placement.values()} == {(0, 0), (5, 0), (0, 5), (5, 5)}

    def test_zero_area_rect(self):
        """Zero-area rects fit anywhere within the bin dimensions"""
        packer = GuillotinePacker(10, 10)
        assert packer.pack(0, 5) == (0, 0)
        assert packer.pack(4, 0) == (0, 0)
        assert packer.pack(0, 11) is None

    def test_empty_bin(self):
        """An empty bin holds nothing with area"""
        assert GuillotinePacker(0, 0).pack(1, 1) is None


class TestShelfPacking:
    """Test the shelf packer"""

    def test_tallest_first_on_shared_shelf(self):
        """The tallest rect opens the shelf; shorter ones follow to its right"""
        placement = pack_rects_shelf([("a", 4, 2), ("b", 4, 6)], (8, 8))
        assert placement["b"] == PackedLocation(0, 0, 4, 6)
        assert placement["a"] == PackedLocation(4, 0, 4, 2)

    def test_new_shelf_when_row_full(self):
        """A rect that does not fit the current shelf starts a new one"""
        packer = ShelfPacker(8, 8)
        assert packer.pack(6, 4) == (0, 0)
        assert packer.pack(6, 4) == (0, 4)
        assert packer.pack(6, 1) is None
