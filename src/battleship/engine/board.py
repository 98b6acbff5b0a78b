"""Board and fleet model: grid cells, ship ownership and random placement."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Sequence

from battleship.telemetry import get_meter, get_tracer

from .ship import FLEET_MANIFEST, Coordinate, Orientation, Ship, ShipSpec

logger = logging.getLogger(__name__)
tracer = get_tracer("battleship.engine.board")
meter = get_meter("battleship.engine.board")

PLACEMENT_COUNTER = meter.create_counter(
    "battleship_engine_ship_placements",
    unit="1",
    description="Number of attempted ship placements",
)

DEFAULT_MAX_PLACEMENT_ATTEMPTS = 10_000

# A cell is either empty (None) or holds the index of the ship occupying it.
Cell = int | None


class PlacementError(RuntimeError):
    """Raised when the fleet cannot be fitted onto the grid."""


def validate_dimension(value: int, label: str) -> int:
    """Reject grid dimensions that are not positive integers."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{label} must be an integer, got {value!r}.")
    if value <= 0:
        raise ValueError(f"{label} must be positive, got {value}.")
    return value


@dataclass
class Board:
    """Grid of cells plus the fleet that owns them."""

    rows: int
    cols: int
    ships: list[Ship] = field(default_factory=list, init=False)
    cells: list[list[Cell]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        validate_dimension(self.rows, "rows")
        validate_dimension(self.cols, "cols")
        self.cells = [[None] * self.cols for _ in range(self.rows)]

    def is_valid_coordinate(self, coord: Coordinate) -> bool:
        """Check whether a coordinate lies inside the board boundaries."""
        return 0 <= coord.row < self.rows and 0 <= coord.col < self.cols

    def cell_at(self, coord: Coordinate) -> Cell:
        """Return the index of the ship occupying ``coord``, or None."""
        return self.cells[coord.row][coord.col]

    def can_place(self, positions: Sequence[Coordinate]) -> bool:
        """Determine whether every position is in bounds and unoccupied."""
        return all(
            self.is_valid_coordinate(coord) and self.cell_at(coord) is None for coord in positions
        )

    def place_ship(self, spec: ShipSpec, start: Coordinate, orientation: Orientation) -> Ship | None:
        """Add a ship to the board if placement is valid, returning it."""
        positions = Ship.layout(spec.length, start, orientation)
        if not self.can_place(positions):
            PLACEMENT_COUNTER.add(1, attributes={"result": "rejected", "ship": spec.name})
            return None

        ship = Ship(index=len(self.ships), name=spec.name, positions=positions)
        for coord in positions:
            self.cells[coord.row][coord.col] = ship.index
        self.ships.append(ship)
        PLACEMENT_COUNTER.add(1, attributes={"result": "success", "ship": spec.name})
        logger.debug(
            "ship_placed",
            extra={
                "ship_name": ship.name,
                "orientation": orientation.name,
                "row": start.row,
                "col": start.col,
            },
        )
        return ship

    def place_fleet(
        self,
        manifest: Sequence[ShipSpec] = FLEET_MANIFEST,
        rng: random.Random | None = None,
        max_attempts: int = DEFAULT_MAX_PLACEMENT_ATTEMPTS,
    ) -> list[Ship]:
        """Randomly place every manifest entry, in order, by rejection sampling."""
        rng = rng or random.Random()
        with tracer.start_as_current_span("board.place_fleet") as span:
            span.set_attribute("board.rows", self.rows)
            span.set_attribute("board.cols", self.cols)
            span.set_attribute("fleet.size", len(manifest))
            for spec in manifest:
                ship = None
                attempts = 0
                while ship is None:
                    if attempts >= max_attempts:
                        logger.error(
                            "fleet_placement_failed",
                            extra={
                                "ship_name": spec.name,
                                "attempts": attempts,
                                "rows": self.rows,
                                "cols": self.cols,
                            },
                        )
                        raise PlacementError(
                            f"Could not place {spec.name} (length {spec.length}) on a "
                            f"{self.rows}x{self.cols} grid after {attempts} attempts."
                        )
                    orientation = rng.choice(list(Orientation))
                    start = Coordinate(rng.randrange(self.rows), rng.randrange(self.cols))
                    ship = self.place_ship(spec, start, orientation)
                    attempts += 1
                logger.debug(
                    "random_ship_placed",
                    extra={"ship_name": spec.name, "attempts": attempts},
                )
            span.set_attribute("fleet.placed", len(self.ships))
        return self.ships


def place_fleet(
    rows: int,
    cols: int,
    manifest: Sequence[ShipSpec] = FLEET_MANIFEST,
    rng: random.Random | None = None,
    max_attempts: int = DEFAULT_MAX_PLACEMENT_ATTEMPTS,
) -> Board:
    """Build a fresh board of the given size with a randomly placed fleet."""
    board = Board(rows, cols)
    board.place_fleet(manifest, rng=rng, max_attempts=max_attempts)
    logger.info(
        "fleet_placed",
        extra={"rows": rows, "cols": cols, "ships": len(board.ships)},
    )
    return board
