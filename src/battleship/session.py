"""Presentation-side session: board-size inputs, selection and play-again intent."""

from __future__ import annotations

import logging
import random
from dataclasses import InitVar, dataclass, field
from typing import Callable

from battleship.config import GameConfig, load_game_config
from battleship.engine.game import BattleshipGame, Shot
from battleship.engine.instrumented_game import InstrumentedBattleshipGame
from battleship.engine.ship import Coordinate

logger = logging.getLogger(__name__)

GameFactory = Callable[..., BattleshipGame]


@dataclass
class GameSession:
    """Owns the current game on behalf of a front-end.

    Restarting is always an explicit call; a finished game only raises the
    ``awaiting_new_game`` flag when the player asks to play again.
    """

    config: GameConfig = field(default_factory=load_game_config)
    rng: random.Random | None = None
    game_factory: GameFactory = InstrumentedBattleshipGame
    rows: InitVar[int | None] = None
    cols: InitVar[int | None] = None
    input_rows: int = field(init=False)
    input_cols: int = field(init=False)
    selected: Coordinate | None = field(init=False, default=None)
    awaiting_new_game: bool = field(init=False, default=False)
    game: BattleshipGame = field(init=False)

    def __post_init__(self, rows: int | None, cols: int | None) -> None:
        if self.rng is None:
            self.rng = random.Random(self.config.seed)
        self.set_dimensions(
            self.config.default_rows if rows is None else rows,
            self.config.default_cols if cols is None else cols,
        )
        self.game = self._build_game()

    def set_dimensions(self, rows: int, cols: int) -> tuple[int, int]:
        """Store clamped board-size inputs for the next game."""
        self.input_rows = self.config.clamp_dimension(rows)
        self.input_cols = self.config.clamp_dimension(cols)
        return self.input_rows, self.input_cols

    def start_new_game(self) -> BattleshipGame:
        self.game = self._build_game()
        self.selected = None
        self.awaiting_new_game = False
        return self.game

    def select_and_shoot(self, row: int, col: int) -> Shot | None:
        """Forward a click on a grid cell. Clicks are ignored once the game is over."""
        if self.game.game_over:
            return None
        self.selected = Coordinate(row, col)
        return self.game.shoot(row, col)

    def request_play_again(self) -> bool:
        if self.game.game_over:
            self.awaiting_new_game = True
        return self.awaiting_new_game

    def _build_game(self) -> BattleshipGame:
        logger.debug(
            "session_new_game",
            extra={"rows": self.input_rows, "cols": self.input_cols},
        )
        return self.game_factory(
            self.input_rows, self.input_cols, rng=self.rng, config=self.config
        )
