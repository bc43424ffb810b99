from typing import Iterable, Sequence

BOARD_SIZE = 5
CENTER = BOARD_SIZE // 2


def is_winning_board(board: Sequence[Sequence[int]], drawn: Iterable[int]) -> bool:
    """Return True if the board has a full row, column or diagonal.

    Rows and columns need every cell drawn. Diagonals skip the center cell
    (free space), so only their four off-center cells are checked.
    Pure: same inputs, same answer.
    """
    drawn = drawn if isinstance(drawn, (set, frozenset)) else set(drawn)
    broken_columns = [False] * BOARD_SIZE
    broken_main_diagonal = False
    broken_anti_diagonal = False

    for row in range(BOARD_SIZE):
        cells = board[row]
        row_complete = True
        for col in range(BOARD_SIZE):
            if cells[col] not in drawn:
                row_complete = False
                broken_columns[col] = True
        if row_complete:
            return True
        if row != CENTER:
            if cells[row] not in drawn:
                broken_main_diagonal = True
            if cells[BOARD_SIZE - 1 - row] not in drawn:
                broken_anti_diagonal = True

    if not all(broken_columns):
        return True
    return not broken_main_diagonal or not broken_anti_diagonal
