import numpy as np
import pytest

from falling_blocks.game import (
    BASE_SHAPES,
    Cell,
    Command,
    FallingBlocksGame,
    GameConfig,
    GameOverReason,
    GameStatus,
    Piece,
    TetrominoType,
    rotate_clockwise,
)


def test_new_game_is_playing(game):
    assert game.status is GameStatus.PLAYING
    assert not game.game_over
    assert game.score == 0
    assert game.current_piece is not None
    assert game.current_piece.y == 0
    assert game.grid.filled_count() == 0


def test_same_seed_same_pieces():
    a = FallingBlocksGame(GameConfig(random_seed=7))
    b = FallingBlocksGame(GameConfig(random_seed=7))
    kinds_a, kinds_b = [], []
    for _ in range(20):
        kinds_a.append(a.current_piece.kind)
        kinds_b.append(b.current_piece.kind)
        a.spawn_piece()
        b.spawn_piece()
    assert kinds_a == kinds_b


def test_move_left_at_wall_is_noop(game):
    while game.move(-1):
        pass
    before = game.snapshot()
    assert min(x for x, _ in game.current_piece.cells()) == 0

    result = game.apply(Command.MOVE_LEFT)

    assert not result.moved
    assert game.current_piece.x == before.piece.x
    assert game.current_piece.y == before.piece.y
    np.testing.assert_array_equal(game.grid.grid, before.board)
    assert game.score == before.score


def test_move_right_until_wall(game):
    moves = 0
    while game.apply(Command.MOVE_RIGHT).moved:
        moves += 1
    assert moves > 0
    assert max(x for x, _ in game.current_piece.cells()) == game.grid.width - 1


def test_soft_drop_moves_down(game):
    result = game.apply(Command.SOFT_DROP)
    assert result.moved and not result.locked
    assert game.current_piece.y == 1


def test_piece_locks_at_floor_and_next_spawns(game):
    game.spawn_piece(TetrominoType.O)
    for _ in range(18):
        assert game.tick().moved
    result = game.tick()

    assert result.locked
    assert result.lines_cleared == 0
    assert game.pieces_locked == 1
    for x, y in [(5, 18), (6, 18), (5, 19), (6, 19)]:
        assert game.grid.is_filled(x, y)
    assert game.current_piece.y == 0
    assert not game.game_over


def test_soft_drop_and_gravity_lock_identically():
    a = FallingBlocksGame(GameConfig(random_seed=3))
    b = FallingBlocksGame(GameConfig(random_seed=3))
    for _ in range(25):
        a.tick()
        b.apply(Command.SOFT_DROP)
    np.testing.assert_array_equal(a.grid.grid, b.grid.grid)
    assert a.current_piece.kind == b.current_piece.kind


def test_score_per_cleared_rows(game):
    game.grid.grid[18:, :] = Cell.FILLED
    game.grid.grid[18:, 5:7] = Cell.EMPTY
    game.spawn_piece(TetrominoType.O)
    for _ in range(18):
        game.tick()

    result = game.tick()

    assert result.locked
    assert result.lines_cleared == 2
    assert result.score_delta == 200
    assert game.score == 200
    assert game.lines_cleared_total == 2
    assert game.grid.filled_count() == 0


def test_lock_without_clear_keeps_score(game):
    game.grid.grid[19, 0] = Cell.FILLED
    game.spawn_piece(TetrominoType.O)
    for _ in range(19):
        result = game.tick()
    assert result.locked
    assert result.score_delta == 0
    assert game.score == 0


def test_blocked_spawn_ends_game_without_touching_board(game):
    game.grid.grid[0:2, :] = Cell.FILLED
    game.grid.grid[0:2, 5] = Cell.EMPTY
    before = game.grid.clone_state()

    assert not game.spawn_piece(TetrominoType.O)

    assert game.game_over
    assert game.game_over_reason is GameOverReason.BLOCKED_SPAWN
    np.testing.assert_array_equal(game.grid.grid, before)


def test_lock_near_top_leads_to_blocked_spawn(game):
    game.grid.grid[2, 1:] = Cell.FILLED
    game.spawn_piece(TetrominoType.O)

    result = game.tick()

    assert result.locked
    assert result.game_over
    assert game.game_over_reason is GameOverReason.BLOCKED_SPAWN


def test_locking_above_top_does_not_end_game(game):
    game.grid.grid[2:, 0] = Cell.FILLED
    game.current_piece = Piece(TetrominoType.I, rotate_clockwise(BASE_SHAPES[TetrominoType.I]), x=0, y=-2)

    result = game.tick()

    assert result.locked
    assert not game.game_over
    assert game.grid.is_filled(0, 0) and game.grid.is_filled(0, 1)


def test_rotate_applies_when_free(game):
    game.spawn_piece(TetrominoType.I)
    game.current_piece.y = 5
    assert game.apply(Command.ROTATE).rotated
    assert game.current_piece.shape.shape == (4, 1)


def test_rotate_rejected_when_blocked(game):
    game.spawn_piece(TetrominoType.I)
    game.grid.grid[2, 4] = Cell.FILLED
    shape_before = game.current_piece.shape

    result = game.apply(Command.ROTATE)

    assert not result.rotated
    assert game.current_piece.shape is shape_before
    assert (game.current_piece.x, game.current_piece.y) == (4, 0)


def test_rotate_has_no_wall_kick(game):
    game.current_piece = Piece(TetrominoType.I, rotate_clockwise(BASE_SHAPES[TetrominoType.I]), x=11, y=5)
    assert not game.rotate()
    assert game.current_piece.x == 11
    assert game.current_piece.shape.shape == (4, 1)


def test_quit_ends_game_and_freezes_state(game):
    result = game.apply(Command.QUIT)
    assert result.game_over
    assert game.game_over_reason is GameOverReason.QUIT

    snapshot = game.snapshot()
    for command in (Command.MOVE_LEFT, Command.SOFT_DROP, Command.ROTATE):
        assert game.apply(command).game_over
    assert game.tick().game_over
    assert game.current_piece.x == snapshot.piece.x
    assert game.current_piece.y == snapshot.piece.y


def test_restart_command_ignored_while_playing(game):
    before = game.snapshot()
    result = game.apply(Command.RESTART)
    assert not result.changed
    assert not game.game_over
    assert game.current_piece.x == before.piece.x


def test_apply_rejects_unknown_command(game):
    with pytest.raises(ValueError):
        game.apply("left")


def test_get_state_overlays_piece(game):
    game.spawn_piece(TetrominoType.O)
    state = game.get_state()
    assert state[0, 5] == 2 and state[1, 6] == 2
    assert game.grid.grid[0, 5] == Cell.EMPTY


def test_snapshot_is_detached(game):
    snapshot = game.snapshot()
    game.tick()
    assert snapshot.piece.y == 0
    snapshot.board[0, 0] = 1
    assert game.grid.grid[0, 0] == Cell.EMPTY


def test_reset_starts_fresh(game):
    game.grid.grid[19, :3] = Cell.FILLED
    game.score = 300
    game.apply(Command.QUIT)
    game.reset(seed=5)
    assert not game.game_over
    assert game.score == 0
    assert game.grid.filled_count() == 0


def test_score_never_decreases_over_random_play():
    game = FallingBlocksGame(GameConfig(random_seed=11))
    commands = [Command.MOVE_LEFT, Command.MOVE_RIGHT, Command.SOFT_DROP, Command.ROTATE]
    last = 0
    steps = 0
    while not game.game_over and steps < 5000:
        game.apply(commands[game.rng.randrange(4)])
        game.tick()
        assert game.score >= last
        assert game.score % 100 == 0
        last = game.score
        steps += 1
    assert game.game_over
