from conftest import ScriptedRandomness, T0
from bingo.services.games.boards import generate_board


def test_board_shape_and_range():
    board = generate_board(1, 'alice', ScriptedRandomness(), T0)
    assert len(board) == 5
    assert all(len(row) == 5 for row in board)
    assert all(0 <= cell < 255 for row in board for cell in row)


def test_same_inputs_same_board():
    a = generate_board(1, 'alice', ScriptedRandomness(fallback=9), T0)
    b = generate_board(1, 'alice', ScriptedRandomness(fallback=9), T0)
    assert a == b


def test_participants_in_same_instant_get_different_boards():
    randomness = ScriptedRandomness(fallback=9)
    alice = generate_board(1, 'alice', randomness, T0)
    bob = generate_board(1, 'bob', randomness, T0)
    assert alice != bob


def test_game_id_and_entropy_change_the_board():
    base = generate_board(1, 'alice', ScriptedRandomness(fallback=9), T0)
    assert generate_board(2, 'alice', ScriptedRandomness(fallback=9), T0) != base
    assert generate_board(1, 'alice', ScriptedRandomness(fallback=10), T0) != base


def test_takes_one_entropy_value_per_board():
    randomness = ScriptedRandomness()
    randomness.queue(1, 2, 3)
    generate_board(1, 'alice', randomness, T0)
    assert list(randomness.values) == [2, 3]
