"""Tests for RackLayout loading and the sequence <-> cell mapping; T4ED default profile."""

import pytest

from t4ed_locator import LayoutError, RackLayout, get_default_layout
from t4ed_locator.types import CellPosition, Coordinate


@pytest.fixture
def layout() -> RackLayout:
    return get_default_layout()


def test_layout_t4ed_default_profile(layout: RackLayout) -> None:
    assert layout.profile == "t4ed"
    assert layout.racks == 2
    assert layout.columns == 5
    assert layout.cells_per_column == 16
    assert layout.rack_size == 80
    assert (layout.min_sequence, layout.max_sequence) == (1, 160)


def test_layout_from_override() -> None:
    small = RackLayout(layout_override={"racks": 1, "columns": 2, "cells_per_column": 3})
    assert small.max_sequence == 6
    assert small.grid() == [[6, 3], [5, 2], [4, 1]]


def test_layout_unknown_profile_raises() -> None:
    with pytest.raises(LayoutError, match="Unknown profile"):
        RackLayout(profile="t5xx")


@pytest.mark.parametrize(
    "override",
    [
        {"racks": 2, "columns": 5},
        {"racks": 0, "columns": 5, "cells_per_column": 16},
        {"racks": 2, "columns": "five", "cells_per_column": 16},
    ],
)
def test_layout_bad_override_raises(override: dict) -> None:
    with pytest.raises(LayoutError):
        RackLayout(layout_override=override)


@pytest.mark.parametrize(
    ("sequence", "rack", "index"),
    [
        (1, 1, 0),
        (16, 1, 15),
        (17, 1, 16),
        (80, 1, 79),
        (81, 2, 0),
        (120, 2, 39),
        (160, 2, 79),
    ],
)
def test_locate(layout: RackLayout, sequence: int, rack: int, index: int) -> None:
    coord = layout.locate(sequence)
    assert coord == Coordinate(rack=rack, index=index)
    assert layout.sequence_of(coord) == sequence


@pytest.mark.parametrize("sequence", [0, 161, -1])
def test_locate_out_of_layout_raises(layout: RackLayout, sequence: int) -> None:
    with pytest.raises(LayoutError):
        layout.locate(sequence)


def test_column_and_slot_follow_bottom_up_right_to_left(layout: RackLayout) -> None:
    # Cell 1: bottom of the rightmost column
    one = layout.locate(1)
    assert (layout.column_of(one), layout.slot_of(one)) == (0, 0)
    assert layout.position(one) == CellPosition(row=15, column=4)
    # Cell 16: top of the rightmost column
    assert layout.position(layout.locate(16)) == CellPosition(row=0, column=4)
    # Cell 17: bottom of the next column to the left
    assert layout.position(layout.locate(17)) == CellPosition(row=15, column=3)
    # Cell 80: top of the leftmost column
    assert layout.position(layout.locate(80)) == CellPosition(row=0, column=0)


def test_grid_matches_physical_rack(layout: RackLayout) -> None:
    grid = layout.grid()
    assert len(grid) == 16
    assert grid[0] == [80, 64, 48, 32, 16]
    assert grid[12] == [68, 52, 36, 20, 4]
    assert grid[15] == [65, 49, 33, 17, 1]
    assert layout.grid(rack=2)[15] == [145, 129, 113, 97, 81]


def test_grid_covers_every_sequence_once(layout: RackLayout) -> None:
    seen = [seq for rack in (1, 2) for row in layout.grid(rack) for seq in row]
    assert sorted(seen) == list(range(1, 161))


def test_coordinate_at_is_inverse_of_position(layout: RackLayout) -> None:
    for seq in range(1, 161):
        coord = layout.locate(seq)
        pos = layout.position(coord)
        assert layout.coordinate_at(pos.row, pos.column, coord.rack) == coord


def test_label_at(layout: RackLayout) -> None:
    assert layout.label_at(15, 4) == "1"
    assert layout.label_at(0, 0) == "80"
    assert layout.label_at(15, 4, rack=2) == "81"


@pytest.mark.parametrize(("row", "column", "rack"), [(16, 0, 1), (0, 5, 1), (-1, 0, 1), (0, 0, 3)])
def test_coordinate_at_outside_raises(layout: RackLayout, row: int, column: int, rack: int) -> None:
    with pytest.raises(LayoutError):
        layout.coordinate_at(row, column, rack)


def test_sequence_of_foreign_coordinate_raises(layout: RackLayout) -> None:
    with pytest.raises(LayoutError):
        layout.sequence_of(Coordinate(rack=3, index=0))
    with pytest.raises(LayoutError):
        layout.sequence_of(Coordinate(rack=1, index=80))
