"""Ship domain model for the Battleship engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Coordinate:
    """Immutable zero-based board coordinate."""

    row: int
    col: int


class Orientation(Enum):
    """Allowed ship orientations."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class ShipSpec:
    """One entry of the fleet manifest."""

    name: str
    length: int


FLEET_MANIFEST: tuple[ShipSpec, ...] = (
    ShipSpec("Destroyer", 2),
    ShipSpec("Cruiser", 3),
    ShipSpec("Battleship", 4),
)


@dataclass
class Ship:
    """A placed ship, identified by its index in the board's fleet."""

    index: int
    name: str
    positions: tuple[Coordinate, ...]
    sunk: bool = False

    def __post_init__(self) -> None:
        self.positions = tuple(self.positions)

    @property
    def length(self) -> int:
        """Return the number of contiguous cells the ship occupies."""
        return len(self.positions)

    @staticmethod
    def layout(length: int, start: Coordinate, orientation: Orientation) -> tuple[Coordinate, ...]:
        """Return the ordered coordinates a ship of ``length`` would cover from ``start``."""
        if orientation is Orientation.HORIZONTAL:
            return tuple(Coordinate(start.row, start.col + offset) for offset in range(length))
        return tuple(Coordinate(start.row + offset, start.col) for offset in range(length))

    def mark_sunk(self) -> None:
        """Flag the ship as sunk. Never reverts."""
        self.sunk = True
