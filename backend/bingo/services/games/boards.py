import hashlib
from typing import List

from .evaluator import BOARD_SIZE
from .randomness import BYTE_RANGE, RandomnessProvider


def generate_board(game_id: int, participant: str, randomness: RandomnessProvider, now: float) -> List[List[int]]:
    """Derive a participant's 5x5 board.

    One entropy value is taken from the provider per board; each cell then
    hashes it together with the time, game id, cell position and participant,
    so two players joining in the same instant still get different boards.
    """
    entropy = randomness.next()
    board = []
    for row in range(BOARD_SIZE):
        cells = []
        for col in range(BOARD_SIZE):
            seed = f"{now!r}:{entropy}:{game_id}:{row}:{col}:{participant}".encode('utf-8')
            digest = hashlib.sha256(seed).digest()
            cells.append(int.from_bytes(digest[:8], 'big') % BYTE_RANGE)
        board.append(cells)
    return board
