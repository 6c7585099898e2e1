from dataclasses import dataclass, field
from typing import List, Optional

from tictactoe.services.games.board import EMPTY, empty_board


@dataclass
class Player:
    sid: str
    username: str
    in_game: bool = False

    def to_dict(self):
        return {
            'username': self.username,
            'inGame': self.in_game,
        }


@dataclass
class LeaderboardEntry:
    username: str
    order: int
    wins: int = 0
    losses: int = 0
    draws: int = 0
    points: int = 0

    def to_dict(self):
        return {
            'username': self.username,
            'wins': self.wins,
            'losses': self.losses,
            'draws': self.draws,
            'points': self.points,
        }


@dataclass
class GameSession:
    id: str
    player1: str
    player2: str
    player1_name: str
    player2_name: str
    board: List[str] = field(default_factory=empty_board)
    current_turn: Optional[str] = None
    move_count: int = 0
    finished: bool = False

    def __post_init__(self):
        if self.current_turn is None:
            self.current_turn = self.player1

    def has_player(self, sid: str) -> bool:
        return sid in (self.player1, self.player2)

    def opponent_of(self, sid: str) -> str:
        return self.player2 if sid == self.player1 else self.player1

    def symbol_for(self, sid: str) -> str:
        return 'X' if sid == self.player1 else 'O'

    def player_for(self, symbol: str) -> str:
        return self.player1 if symbol == 'X' else self.player2

    def is_open(self, position) -> bool:
        # bool is an int subclass; reject it explicitly
        if isinstance(position, bool) or not isinstance(position, int):
            return False
        return 0 <= position < len(self.board) and self.board[position] == EMPTY

    def to_state(self):
        return {
            'board': list(self.board),
            'currentTurn': self.current_turn,
            'player1Name': self.player1_name,
            'player2Name': self.player2_name,
        }
