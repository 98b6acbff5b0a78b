"""Gameplay tests: shot resolution, lifecycle and stats."""

import logging
import random

import pytest
from battleship.config import GameConfig
from battleship.engine.game import (
    START_MESSAGE,
    VICTORY_MESSAGE,
    BattleshipGame,
    GamePhase,
    GameStats,
    Shot,
    new_game,
    shoot,
    stats,
)
from battleship.engine.ship import Coordinate


def make_game(rows: int = 8, cols: int = 8, seed: int = 42) -> BattleshipGame:
    return new_game(rows, cols, rng=random.Random(seed), config=GameConfig())


def ship_named(game: BattleshipGame, name: str):
    return next(ship for ship in game.ships if ship.name == name)


def first_empty_cell(game: BattleshipGame) -> Coordinate:
    return next(
        coord for coord in game.remaining_targets() if game.cell_at(coord.row, coord.col) is None
    )


def assert_consistent(game: BattleshipGame) -> None:
    summary = game.game_stats()
    assert summary.hits + summary.misses <= game.rows * game.cols
    hits_on_ships = sum(
        game.shot_at(coord.row, coord.col) is Shot.HIT for ship in game.ships for coord in ship.positions
    )
    assert summary.hits == hits_on_ships
    for ship in game.ships:
        fully_hit = all(game.shot_at(c.row, c.col) is Shot.HIT for c in ship.positions)
        assert ship.sunk is fully_hit
    assert game.game_over is (summary.ships_left == 0)


def test_new_game_initial_stats() -> None:
    game = make_game(8, 8)
    assert stats(game) == GameStats(turns=0, hits=0, misses=0, ships_left=3, total_ships=3)
    assert game.phase is GamePhase.IN_PROGRESS
    assert game.message == START_MESSAGE
    assert game.play_again is False
    assert all(shot is Shot.UNTARGETED for row in game.shots for shot in row)
    assert len(game.shots) == 8 and all(len(row) == 8 for row in game.shots)


def test_new_game_supports_rectangular_grids() -> None:
    game = make_game(5, 12)
    assert (game.rows, game.cols) == (5, 12)
    assert len(game.shots) == 5 and len(game.shots[0]) == 12
    assert len(game.remaining_targets()) == 60


def test_miss_on_empty_cell_only_changes_that_cell() -> None:
    game = make_game()
    target = first_empty_cell(game)
    before = game.shots

    outcome = shoot(game, target.row, target.col)

    assert outcome is Shot.MISS
    assert game.message == f"Miss at ({target.row + 1}, {target.col + 1})!"
    after = game.shots
    changed = [
        (r, c) for r in range(game.rows) for c in range(game.cols) if before[r][c] is not after[r][c]
    ]
    assert changed == [(target.row, target.col)]
    summary = game.game_stats()
    assert summary.misses == 1
    assert summary.turns == 1
    assert all(not ship.sunk for ship in game.ships)


def test_hit_reports_one_based_coordinates() -> None:
    game = make_game()
    target = ship_named(game, "Battleship").positions[0]
    assert game.shoot(target.row, target.col) is Shot.HIT
    assert game.message == f"Hit at ({target.row + 1}, {target.col + 1})!"
    assert not ship_named(game, "Battleship").sunk


def test_sinking_destroyer() -> None:
    game = make_game()
    destroyer = ship_named(game, "Destroyer")
    for coord in destroyer.positions:
        game.shoot(coord.row, coord.col)

    assert destroyer.sunk is True
    assert game.message == "You sunk the Destroyer!"
    summary = game.game_stats()
    assert summary.hits == 2
    assert summary.ships_left == 2
    assert game.phase is GamePhase.IN_PROGRESS
    assert_consistent(game)


def test_repeated_shot_counts_turn_without_changing_state() -> None:
    game = make_game()
    target = first_empty_cell(game)
    game.shoot(target.row, target.col)
    message = game.message
    shots = game.shots

    outcome = game.shoot(target.row, target.col)

    assert outcome is Shot.MISS
    assert game.shots == shots
    assert game.message == message
    summary = game.game_stats()
    assert summary.turns == 2
    assert summary.misses == 1


def test_repeated_hit_on_sunk_ship_keeps_it_sunk() -> None:
    game = make_game()
    destroyer = ship_named(game, "Destroyer")
    for coord in destroyer.positions:
        game.shoot(coord.row, coord.col)
    game.shoot(destroyer.positions[0].row, destroyer.positions[0].col)
    assert destroyer.sunk is True
    assert game.message == "You sunk the Destroyer!"
    assert game.turns == 3


def test_sinking_whole_fleet_ends_game() -> None:
    game = make_game()
    for ship in game.ships:
        for coord in ship.positions:
            assert not game.game_over
            game.shoot(coord.row, coord.col)
            assert_consistent(game)

    assert game.game_over is True
    assert game.phase is GamePhase.GAME_OVER
    assert game.message == VICTORY_MESSAGE
    assert game.play_again is True
    summary = game.game_stats()
    assert summary.ships_left == 0
    assert summary.hits == 9
    assert summary.misses == 0
    assert summary.turns == 9


def test_shots_after_game_over_are_ignored_but_counted() -> None:
    game = make_game()
    for ship in game.ships:
        for coord in ship.positions:
            game.shoot(coord.row, coord.col)
    target = first_empty_cell(game)

    outcome = game.shoot(target.row, target.col)

    assert outcome is Shot.UNTARGETED
    assert game.shot_at(target.row, target.col) is Shot.UNTARGETED
    assert game.message == VICTORY_MESSAGE
    assert game.game_over is True
    assert game.game_stats().turns == 10
    assert game.game_stats().misses == 0


@pytest.mark.parametrize(
    "row,col",
    [(-1, 0), (0, -1), (8, 0), (0, 8), (20, 20), (1.0, 2), (2, "3"), (True, 0), (None, 1)],
)
def test_invalid_shot_raises_without_counting(row, col) -> None:
    game = make_game()
    before = game.shots
    with pytest.raises(ValueError):
        game.shoot(row, col)
    assert game.turns == 0
    assert game.shots == before
    assert game.message == START_MESSAGE


def test_invalid_shot_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    game = make_game()
    caplog.clear()
    with caplog.at_level(logging.ERROR, logger="battleship.engine.game"):
        with pytest.raises(ValueError):
            game.shoot(8, 0)
    assert [record.getMessage() for record in caplog.records] == ["shot_rejected"]


def test_read_queries_reject_bad_coordinates_without_logging_a_shot(
    caplog: pytest.LogCaptureFixture,
) -> None:
    game = make_game()
    caplog.clear()
    with caplog.at_level(logging.DEBUG, logger="battleship.engine.game"):
        with pytest.raises(ValueError):
            game.shot_at(8, 0)
        with pytest.raises(ValueError):
            game.cell_at(0, 1.5)
    assert caplog.records == []
    assert game.turns == 0


def test_random_play_keeps_invariants() -> None:
    game = make_game(10, 6, seed=3)
    rng = random.Random(11)
    targets = [Coordinate(r, c) for r in range(game.rows) for c in range(game.cols)]
    rng.shuffle(targets)
    previous_turns = 0
    sunk_seen: set[str] = set()

    for coord in targets + targets[:5]:
        game.shoot(coord.row, coord.col)
        assert game.turns == previous_turns + 1
        previous_turns = game.turns
        assert sunk_seen <= {ship.name for ship in game.ships if ship.sunk}
        sunk_seen = {ship.name for ship in game.ships if ship.sunk}
        assert_consistent(game)

    assert game.game_over


def test_game_stats_is_read_only() -> None:
    game = make_game()
    first = game.game_stats()
    second = game.game_stats()
    assert first == second
    assert game.turns == 0


def test_game_stats_serialises() -> None:
    summary = GameStats(turns=4, hits=2, misses=2, ships_left=2, total_ships=3)
    assert summary.model_dump() == {
        "turns": 4,
        "hits": 2,
        "misses": 2,
        "ships_left": 2,
        "total_ships": 3,
    }
    assert summary.summary() == "Turns: 4 | Hits: 2 | Misses: 2 | Ships left: 2/3"


def test_new_game_replaces_rather_than_resets() -> None:
    old = make_game()
    target = first_empty_cell(old)
    old.shoot(target.row, target.col)

    fresh = new_game(6, 9, rng=random.Random(1), config=GameConfig())
    assert fresh is not old
    assert fresh.game_stats().turns == 0
    assert old.game_stats().turns == 1


def test_new_game_uses_config_seed() -> None:
    config = GameConfig(seed=17)
    first = BattleshipGame(8, 8, config=config)
    second = BattleshipGame(8, 8, config=config)
    assert [s.positions for s in first.ships] == [s.positions for s in second.ships]


def test_new_game_rejects_non_positive_dimensions() -> None:
    with pytest.raises(ValueError):
        new_game(0, 8, config=GameConfig())
