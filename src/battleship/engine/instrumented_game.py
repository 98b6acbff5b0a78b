"""Instrumented Battleship game with telemetry hooks."""

from __future__ import annotations

import time

from battleship.engine.game import BattleshipGame, Shot
from battleship.telemetry import get_logger, get_tracer, record_game_metric


class InstrumentedBattleshipGame(BattleshipGame):
    """Wraps BattleshipGame with per-game tracing, metrics and logging."""

    def __init__(self, *args, **kwargs) -> None:
        self._logger = get_logger("battleship.engine")
        self._tracer = get_tracer("battleship.engine")
        self._game_start_time = time.perf_counter()
        self._completed = False
        with self._tracer.start_as_current_span("battleship.engine.new_game") as span:
            super().__init__(*args, **kwargs)
            span.set_attribute("board.rows", self.rows)
            span.set_attribute("board.cols", self.cols)
            span.set_attribute("fleet.size", len(self.board.ships))
        record_game_metric(
            "battleship_game_started_total",
            1,
            {"rows": self.rows, "cols": self.cols},
        )
        self._logger.info("New %dx%d game with %d ships", self.rows, self.cols, len(self.board.ships))

    def shoot(self, row: int, col: int) -> Shot:
        with self._tracer.start_as_current_span("battleship.engine.shoot") as span:
            span.set_attribute("coord.row", row)
            span.set_attribute("coord.col", col)

            try:
                outcome = super().shoot(row, col)
            except ValueError as exc:
                record_game_metric(
                    "battleship_game_invalid_shots_total",
                    1,
                    {"reason": "out_of_bounds"},
                )
                span.record_exception(exc)
                span.set_attribute("error", True)
                self._logger.error("Invalid shot at (%d,%d): %s", row, col, exc)
                raise

            span.set_attribute("shot_outcome", outcome.name)
            record_game_metric("battleship_shots_total", 1)
            record_game_metric(
                "battleship_shots_by_result_total",
                1,
                {"result": outcome.value},
            )
            self._logger.info("shoot coord=(%d,%d) outcome=%s", row, col, outcome.name)

            if self.game_over and not self._completed:
                self._finish_game()
            return outcome

    def _finish_game(self) -> None:
        self._completed = True
        duration = time.perf_counter() - self._game_start_time
        summary = self.game_stats()

        record_game_metric("battleship_game_completed_total", 1)
        record_game_metric("battleship_game_duration_seconds", duration)

        with self._tracer.start_as_current_span("battleship.engine.game_complete") as span:
            span.set_attribute("turns", summary.turns)
            span.set_attribute("hits", summary.hits)
            span.set_attribute("misses", summary.misses)
            span.set_attribute("duration_ms", duration * 1000)

        self._logger.info(
            "Game finished. turns=%d hits=%d misses=%d duration_s=%.3f",
            summary.turns,
            summary.hits,
            summary.misses,
            duration,
        )
