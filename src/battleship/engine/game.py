"""Single-player Battleship game engine: shot resolution, lifecycle and stats."""

from __future__ import annotations

import logging
import random
from enum import Enum

from pydantic import BaseModel, ConfigDict

from battleship.config import GameConfig, load_game_config
from battleship.telemetry import get_meter, get_tracer

from .board import Board, Cell, place_fleet
from .ship import FLEET_MANIFEST, Coordinate, Ship

logger = logging.getLogger(__name__)
tracer = get_tracer("battleship.engine.game")
meter = get_meter("battleship.engine.game")

SHOT_COUNTER = meter.create_counter(
    "battleship_engine_shots",
    unit="1",
    description="Shots fired at the board, by outcome",
)

START_MESSAGE = "Game started!"
VICTORY_MESSAGE = "Congratulations! You sunk all the ships!"


class Shot(Enum):
    """State of a board cell from the perspective of shots taken."""

    UNTARGETED = "untargeted"
    MISS = "miss"
    HIT = "hit"


class GamePhase(Enum):
    """Lifecycle of a single game. GAME_OVER is terminal."""

    IN_PROGRESS = "in_progress"
    GAME_OVER = "game_over"


class GameStats(BaseModel):
    """Read-only projection of a game's counters."""

    model_config = ConfigDict(frozen=True)

    turns: int
    hits: int
    misses: int
    ships_left: int
    total_ships: int

    def summary(self) -> str:
        return (
            f"Turns: {self.turns} | Hits: {self.hits} | Misses: {self.misses} "
            f"| Ships left: {self.ships_left}/{self.total_ships}"
        )


class BattleshipGame:
    """Owns the fleet, the shot grid and the turn counter for one game.

    A game is never reset in place; start a new one with :func:`new_game`.
    """

    def __init__(
        self,
        rows: int,
        cols: int,
        rng: random.Random | None = None,
        config: GameConfig | None = None,
    ) -> None:
        self.config = config or load_game_config()
        if rng is None:
            rng = random.Random(self.config.seed)
        with tracer.start_as_current_span("game.new") as span:
            span.set_attribute("board.rows", rows)
            span.set_attribute("board.cols", cols)
            self.board: Board = place_fleet(
                rows,
                cols,
                FLEET_MANIFEST,
                rng=rng,
                max_attempts=self.config.max_placement_attempts,
            )
        self.rows = rows
        self.cols = cols
        self._shots: list[list[Shot]] = [[Shot.UNTARGETED] * cols for _ in range(rows)]
        self.turns = 0
        self.game_over = False
        self.message = START_MESSAGE
        self.play_again = False
        logger.info("game_started", extra={"rows": rows, "cols": cols})

    @property
    def phase(self) -> GamePhase:
        return GamePhase.GAME_OVER if self.game_over else GamePhase.IN_PROGRESS

    @property
    def ships(self) -> tuple[Ship, ...]:
        return tuple(self.board.ships)

    @property
    def shots(self) -> tuple[tuple[Shot, ...], ...]:
        """Snapshot of the shot grid, row-major."""
        return tuple(tuple(row) for row in self._shots)

    def shot_at(self, row: int, col: int) -> Shot:
        self._check_bounds(row, col)
        return self._shots[row][col]

    def cell_at(self, row: int, col: int) -> Cell:
        self._check_bounds(row, col)
        return self.board.cell_at(Coordinate(row, col))

    def remaining_targets(self) -> list[Coordinate]:
        """Return all coordinates that have not been fired at yet."""
        return [
            Coordinate(row, col)
            for row in range(self.rows)
            for col in range(self.cols)
            if self._shots[row][col] is Shot.UNTARGETED
        ]

    def shoot(self, row: int, col: int) -> Shot:
        """Fire at ``(row, col)`` and return the shot state of that cell afterwards."""
        with tracer.start_as_current_span("game.shoot") as span:
            span.set_attribute("shot.row", row)
            span.set_attribute("shot.col", col)
            try:
                self._check_bounds(row, col)
            except ValueError:
                logger.error(
                    "shot_rejected",
                    extra={"row": row, "col": col, "rows": self.rows, "cols": self.cols},
                )
                raise
            self.turns += 1
            span.set_attribute("game.turns", self.turns)

            current = self._shots[row][col]
            if self.game_over or current is not Shot.UNTARGETED:
                span.set_attribute("shot.outcome", "ignored")
                logger.debug(
                    "shot_ignored",
                    extra={"row": row, "col": col, "game_over": self.game_over},
                )
                return current

            ship_index = self.board.cell_at(Coordinate(row, col))
            if ship_index is None:
                self._shots[row][col] = Shot.MISS
                self.message = f"Miss at ({row + 1}, {col + 1})!"
                logger.info("shot_miss", extra={"row": row, "col": col})
            else:
                self._shots[row][col] = Shot.HIT
                self.message = f"Hit at ({row + 1}, {col + 1})!"
                ship = self.board.ships[ship_index]
                logger.info(
                    "shot_hit",
                    extra={"row": row, "col": col, "ship_name": ship.name},
                )
                if all(self._shots[c.row][c.col] is Shot.HIT for c in ship.positions):
                    ship.mark_sunk()
                    self.message = f"You sunk the {ship.name}!"
                    span.set_attribute("ship.sunk", ship.name)
                    logger.info("ship_sunk", extra={"ship_name": ship.name, "turns": self.turns})

            outcome = self._shots[row][col]
            span.set_attribute("shot.outcome", outcome.value)
            SHOT_COUNTER.add(1, attributes={"outcome": outcome.value})

            if self.ships_left() == 0:
                self.game_over = True
                self.message = VICTORY_MESSAGE
                self.play_again = True
                span.set_attribute("game.over", True)
                logger.info("game_over", extra={"turns": self.turns})
            return outcome

    def ships_left(self) -> int:
        return sum(1 for ship in self.board.ships if not ship.sunk)

    def game_stats(self) -> GameStats:
        """Count hits, misses and surviving ships. No side effects."""
        hits = 0
        misses = 0
        for row in self._shots:
            for shot in row:
                if shot is Shot.HIT:
                    hits += 1
                elif shot is Shot.MISS:
                    misses += 1
        return GameStats(
            turns=self.turns,
            hits=hits,
            misses=misses,
            ships_left=self.ships_left(),
            total_ships=len(self.board.ships),
        )

    def _check_bounds(self, row: int, col: int) -> None:
        """Raise ValueError unless ``(row, col)`` are integer indices inside the grid."""
        for value in (row, col):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Grid indices must be integers, got {value!r}.")
        if not self.board.is_valid_coordinate(Coordinate(row, col)):
            raise ValueError(
                f"Coordinate ({row}, {col}) is outside the {self.rows}x{self.cols} grid."
            )


def new_game(
    rows: int,
    cols: int,
    rng: random.Random | None = None,
    config: GameConfig | None = None,
) -> BattleshipGame:
    """Create a freshly placed game. Old games are discarded, never reset."""
    return BattleshipGame(rows, cols, rng=rng, config=config)


def shoot(state: BattleshipGame, row: int, col: int) -> Shot:
    return state.shoot(row, col)


def stats(state: BattleshipGame) -> GameStats:
    return state.game_stats()
