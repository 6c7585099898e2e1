import logging
import random
from typing import List, Tuple

from tictactoe.models import Player
from .broadcast import Broadcaster
from .errors import InsufficientPlayers
from .registry import PlayerRegistry
from .sessions import SessionManager

logger = logging.getLogger(__name__)


class TournamentScheduler:
    """First-round elimination pairings over the idle players.

    Only round one is materialized; each pair is started as an ordinary
    session and no bracket progression is tracked afterwards.
    """

    def __init__(
        self,
        registry: PlayerRegistry,
        sessions: SessionManager,
        broadcast: Broadcaster,
        min_players: int = 2,
        shuffle=random.shuffle,
    ):
        self._registry = registry
        self._sessions = sessions
        self._broadcast = broadcast
        self._min_players = max(2, min_players)
        self._shuffle = shuffle
        self.bracket: List[Tuple[str, str]] = []

    def pair(self, players: List[Player]) -> List[Tuple[Player, Player]]:
        shuffled = list(players)
        self._shuffle(shuffled)
        return [(shuffled[i], shuffled[i + 1]) for i in range(0, len(shuffled) - 1, 2)]

    def start(self) -> List[Tuple[str, str]]:
        idle = self._registry.list_idle()
        if len(idle) < self._min_players:
            raise InsufficientPlayers(f"Need at least {self._min_players} players for tournament")

        pairs = self.pair(idle)
        for first, second in pairs:
            self._sessions.start(first.sid, second.sid)

        self.bracket = [(first.username, second.username) for first, second in pairs]
        self._broadcast.announce('tournamentStart', {
            'bracket': [list(pair) for pair in self.bracket],
        })
        logger.info(f"[tournament] started players={len(idle)} matches={len(pairs)}")
        return self.bracket
