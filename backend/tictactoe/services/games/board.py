from typing import List, Optional

EMPTY = ''

WINNING_LINES = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),  # rows
    (0, 3, 6), (1, 4, 7), (2, 5, 8),  # columns
    (0, 4, 8), (2, 4, 6),             # diagonals
)


def empty_board() -> List[str]:
    return [EMPTY] * 9


def evaluate_winner(board) -> Optional[str]:
    """Return the symbol filling any winning line, or None."""
    for a, b, c in WINNING_LINES:
        if board[a] != EMPTY and board[a] == board[b] == board[c]:
            return board[a]
    return None
