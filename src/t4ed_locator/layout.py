"""RackLayout: load rack geometry profiles via importlib.resources; sequence <-> cell mapping."""

import json
import logging
from importlib import resources
from typing import Any

from .errors import LayoutError
from .types import CellPosition, Coordinate

logger = logging.getLogger(__name__)

_PROFILE_RESOURCE: dict[str, str] = {
    "t4ed": "t4ed_locator.data.t4ed_layout",
}

_REQUIRED_KEYS = ("racks", "columns", "cells_per_column")


def _parse_geometry(raw: dict[str, Any], profile: str) -> tuple[int, int, int]:
    """Pull (racks, columns, cells_per_column) out of a profile dict, all positive ints."""
    values = []
    for key in _REQUIRED_KEYS:
        if key not in raw:
            raise LayoutError(f"Layout profile {profile!r} is missing {key!r}", profile=profile)
        try:
            value = int(raw[key])
        except (TypeError, ValueError):
            raise LayoutError(f"Layout {key!r} must be an integer, got {raw[key]!r}", profile=profile) from None
        if value < 1:
            raise LayoutError(f"Layout {key!r} must be >= 1, got {value}", profile=profile)
        values.append(value)
    return values[0], values[1], values[2]


class RackLayout:
    """
    Physical rack geometry and the fixed sequence numbering of its cells.

    Within a rack, cell 1 is the bottom of the rightmost column; numbers go up
    the column, then continue at the bottom of the next column to the left.
    Sequences are global: rack 2 starts right after the last cell of rack 1.
    """

    def __init__(self, profile: str = "t4ed", layout_override: dict[str, Any] | None = None) -> None:
        """
        Load geometry for the given profile, or use layout_override
        (a dict with racks, columns, cells_per_column). Default profile is t4ed.
        """
        self._profile = profile.lower()

        if layout_override is not None:
            self._racks, self._columns, self._cells = _parse_geometry(layout_override, self._profile)
            logger.debug("RackLayout loaded from override: %s", self)
            return

        resource_name = _PROFILE_RESOURCE.get(self._profile)
        if not resource_name:
            raise LayoutError(f"Unknown profile: {profile!r}", profile=profile)

        pkg, name = resource_name.rsplit(".", 1)
        json_name = f"{name}.json"
        try:
            with resources.files(pkg).joinpath(json_name).open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise LayoutError(f"Layout resource not found: {pkg}/{json_name}", profile=profile) from None

        if not isinstance(data, dict):
            raise LayoutError(f"Layout resource {json_name} must hold a JSON object", profile=profile)
        self._racks, self._columns, self._cells = _parse_geometry(data, self._profile)
        logger.debug("RackLayout loaded for profile %s: %s", self._profile, self)

    def __repr__(self) -> str:
        return (
            f"RackLayout(profile={self._profile!r}, racks={self._racks}, "
            f"columns={self._columns}, cells_per_column={self._cells})"
        )

    @property
    def profile(self) -> str:
        return self._profile

    @property
    def racks(self) -> int:
        return self._racks

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def cells_per_column(self) -> int:
        return self._cells

    @property
    def rack_size(self) -> int:
        return self._columns * self._cells

    @property
    def min_sequence(self) -> int:
        return 1

    @property
    def max_sequence(self) -> int:
        return self._racks * self.rack_size

    def contains(self, sequence: int) -> bool:
        return self.min_sequence <= sequence <= self.max_sequence

    def locate(self, sequence: int) -> Coordinate:
        """Map a global sequence to its rack and 0-based in-rack index."""
        if not self.contains(sequence):
            raise LayoutError(
                f"Sequence {sequence} outside {self.min_sequence}..{self.max_sequence}",
                profile=self._profile,
            )
        rack, index = divmod(sequence - 1, self.rack_size)
        return Coordinate(rack=rack + 1, index=index)

    def _check(self, coordinate: Coordinate) -> None:
        if coordinate.rack > self._racks or coordinate.index >= self.rack_size:
            raise LayoutError(f"{coordinate} is outside {self}", profile=self._profile)

    def sequence_of(self, coordinate: Coordinate) -> int:
        """Global sequence of a coordinate (inverse of locate)."""
        self._check(coordinate)
        return (coordinate.rack - 1) * self.rack_size + coordinate.index + 1

    def column_of(self, coordinate: Coordinate) -> int:
        """Column in build order: 0 is the rightmost column."""
        self._check(coordinate)
        return coordinate.index // self._cells

    def slot_of(self, coordinate: Coordinate) -> int:
        """Vertical slot within the column: 0 is the bottom cell."""
        self._check(coordinate)
        return coordinate.index % self._cells

    def position(self, coordinate: Coordinate) -> CellPosition:
        """Display position of a cell, row from the top and column from the left."""
        return CellPosition(
            row=self._cells - 1 - self.slot_of(coordinate),
            column=self._columns - 1 - self.column_of(coordinate),
        )

    def coordinate_at(self, row: int, column: int, rack: int = 1) -> Coordinate:
        """Hit-test a display position (row from the top, column from the left)."""
        if not (0 <= row < self._cells and 0 <= column < self._columns and 1 <= rack <= self._racks):
            raise LayoutError(
                f"No cell at row={row}, column={column} in rack {rack}",
                profile=self._profile,
            )
        build_column = self._columns - 1 - column
        slot = self._cells - 1 - row
        return Coordinate(rack=rack, index=build_column * self._cells + slot)

    def label_at(self, row: int, column: int, rack: int = 1) -> str:
        """The data-seq label a pointer adapter reads from the cell at a display position."""
        return str(self.sequence_of(self.coordinate_at(row, column, rack)))

    def grid(self, rack: int = 1) -> list[list[int]]:
        """Sequences of one rack as drawn: rows top to bottom, columns left to right."""
        return [
            [self.sequence_of(self.coordinate_at(row, column, rack)) for column in range(self._columns)]
            for row in range(self._cells)
        ]


def get_default_layout(profile: str = "t4ed") -> RackLayout:
    """Load and return the RackLayout for the given profile (default t4ed)."""
    return RackLayout(profile=profile)
