import logging
from typing import Dict, List, Optional

from tictactoe.models import LeaderboardEntry

logger = logging.getLogger(__name__)

WIN_POINTS = 3
DRAW_POINTS = 1


class Leaderboard:
    """Cumulative results keyed by display name.

    Entries outlive the connection that created them, so a player who
    reconnects under the same name keeps their record. Ranking is by points,
    ties going to the name registered first.
    """

    def __init__(self):
        self._entries: Dict[str, LeaderboardEntry] = {}

    def ensure(self, username: str) -> LeaderboardEntry:
        entry = self._entries.get(username)
        if entry is None:
            entry = LeaderboardEntry(username=username, order=len(self._entries))
            self._entries[username] = entry
        return entry

    def get(self, username: str) -> Optional[LeaderboardEntry]:
        return self._entries.get(username)

    def record_win(self, winner: str, loser: str) -> None:
        """Apply a decided result: +1 win/+3 points to winner, +1 loss to loser."""
        w = self.ensure(winner)
        w.wins += 1
        w.points += WIN_POINTS
        self.ensure(loser).losses += 1
        logger.info(f"[score] win={winner} loss={loser} points={w.points}")

    def record_draw(self, first: str, second: str) -> None:
        for name in (first, second):
            entry = self.ensure(name)
            entry.draws += 1
            entry.points += DRAW_POINTS
        logger.info(f"[score] draw {first} / {second}")

    def ranked(self) -> List[LeaderboardEntry]:
        return sorted(self._entries.values(), key=lambda e: (-e.points, e.order))

    def top(self, limit: int = 10) -> List[LeaderboardEntry]:
        return self.ranked()[:limit]

    def __len__(self):
        return len(self._entries)
