import logging
import threading
import uuid
from typing import Dict, List, Optional

from tictactoe.models import GameSession
from .board import evaluate_winner
from .broadcast import Broadcaster
from .matchmaking import MatchmakingQueue
from .registry import PlayerRegistry
from .scheduler import DeferredTasks
from .scoring import Leaderboard

logger = logging.getLogger(__name__)

WIN = 'win'
DRAW = 'draw'


def generate_session_id(existing) -> str:
    """Generate a session id not used by any live session."""
    while True:
        session_id = f"game_{uuid.uuid4().hex[:12]}"
        if session_id not in existing:
            return session_id


class SessionManager:
    """Owns every live game and drives each one's turn state machine.

    Invalid input (unknown or finished session, out of turn, bad or occupied
    cell) is dropped without a reply: the transport can deliver stale or
    duplicated intents after a state change and they must not disturb a game.

    Finished sessions linger for ``linger_sec`` before removal so the final
    broadcasts are never raced by deletion. A disconnect removes its sessions
    at once and cancels the pending removal.
    """

    def __init__(
        self,
        registry: PlayerRegistry,
        leaderboard: Leaderboard,
        queue: MatchmakingQueue,
        broadcast: Broadcaster,
        deferred: DeferredTasks,
        linger_sec: float = 1.0,
        lock=None,
    ):
        self._registry = registry
        self._leaderboard = leaderboard
        self._queue = queue
        self._broadcast = broadcast
        self._deferred = deferred
        self._linger_sec = linger_sec
        self._lock = lock or threading.RLock()
        self._sessions: Dict[str, GameSession] = {}
        # requester sid -> sid the rematch was offered to
        self._rematch_offers: Dict[str, str] = {}

    # ---- lookups ----

    def get(self, session_id) -> Optional[GameSession]:
        # ids arrive straight from client payloads
        if not isinstance(session_id, str):
            return None
        return self._sessions.get(session_id)

    def sessions_for(self, sid: str) -> List[GameSession]:
        return [s for s in self._sessions.values() if s.has_player(sid)]

    def active_count(self) -> int:
        return sum(1 for s in self._sessions.values() if not s.finished)

    def __len__(self):
        return len(self._sessions)

    def __contains__(self, session_id):
        return session_id in self._sessions

    # ---- lifecycle ----

    def start(self, first: str, second: str) -> GameSession:
        """Start a game with ``first`` as X, moving first.

        Both sids must be registered idle players.
        """
        p1 = self._registry.get(first)
        p2 = self._registry.get(second)
        p1.in_game = True
        p2.in_game = True

        session = GameSession(
            id=generate_session_id(self._sessions),
            player1=first,
            player2=second,
            player1_name=p1.username,
            player2_name=p2.username,
        )
        self._sessions[session.id] = session
        self._queue.discard(first)
        self._queue.discard(second)

        logger.info(f"[game-start] id={session.id} {p1.username} vs {p2.username}")
        self._broadcast.push_game_start(session)
        self._broadcast.push_game_state(session)
        self._broadcast.push_lobby(self.active_count())
        return session

    def apply_move(self, session_id, sid: str, position) -> bool:
        session = self.get(session_id)
        if session is None or session.finished:
            logger.debug(f"[move-ignored] id={session_id} sid={sid} no live session")
            return False
        if session.current_turn != sid:
            logger.debug(f"[move-ignored] id={session_id} sid={sid} out of turn")
            return False
        if not session.is_open(position):
            logger.debug(f"[move-ignored] id={session_id} sid={sid} bad cell {position!r}")
            return False

        session.board[position] = session.symbol_for(sid)
        session.move_count += 1

        winner = evaluate_winner(session.board)
        if winner:
            self.end(session_id, session.player_for(winner), WIN)
        elif session.move_count == len(session.board):
            self.end(session_id, None, DRAW)
        else:
            session.current_turn = session.opponent_of(sid)
            self._broadcast.push_game_state(session)
        return True

    def end(self, session_id, winner: Optional[str], outcome: str) -> bool:
        session = self.get(session_id)
        if session is None or session.finished:
            return False

        session.finished = True
        for sid in (session.player1, session.player2):
            player = self._registry.get(sid)
            if player:
                player.in_game = False

        if outcome == WIN:
            loser = session.opponent_of(winner)
            self._leaderboard.record_win(self._name_of(session, winner), self._name_of(session, loser))
            self._broadcast.push_game_end(session, winner)
        else:
            self._leaderboard.record_draw(session.player1_name, session.player2_name)
            self._broadcast.push_game_end(session, None)

        logger.info(f"[game-end] id={session_id} outcome={outcome} moves={session.move_count}")
        self._deferred.schedule(session_id, self._linger_sec, self._finalize)
        self._broadcast.push_lobby(self.active_count())
        return True

    def _finalize(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None or not session.finished:
                return
            del self._sessions[session_id]
            logger.debug(f"[game-removed] id={session_id}")

    def remove(self, session_id) -> Optional[GameSession]:
        self._deferred.cancel(session_id)
        return self._sessions.pop(session_id, None)

    def handle_disconnect(self, sid: str) -> List[GameSession]:
        """Tear down every session involving ``sid``; nobody is scored."""
        removed = []
        for session in self.sessions_for(sid):
            opponent = session.opponent_of(sid)
            if not session.finished:
                other = self._registry.get(opponent)
                if other:
                    other.in_game = False
                self._broadcast.notify(opponent, 'opponentDisconnected')
            self.remove(session.id)
            removed.append(session)
            logger.info(f"[game-abandoned] id={session.id} by={sid}")
        self.drop_offers(sid)
        return removed

    # ---- rematch ----

    def request_rematch(self, session_id, requester: str) -> bool:
        session = self.get(session_id)
        if session is None or not session.has_player(requester):
            return False
        opponent = session.opponent_of(requester)
        self._rematch_offers[requester] = opponent
        self._broadcast.notify(opponent, 'rematchRequest', {'requesterId': requester})
        return True

    def accept_rematch(self, accepter: str, requester) -> Optional[GameSession]:
        if not isinstance(requester, str) or self._rematch_offers.get(requester) != accepter:
            logger.debug(f"[rematch-ignored] {accepter} accepted no offer from {requester}")
            return None
        if not (self._registry.is_idle(accepter) and self._registry.is_idle(requester)):
            return None
        del self._rematch_offers[requester]
        self._rematch_offers.pop(accepter, None)
        return self.start(accepter, requester)

    def drop_offers(self, sid: str) -> None:
        self._rematch_offers.pop(sid, None)
        for requester, target in list(self._rematch_offers.items()):
            if target == sid:
                del self._rematch_offers[requester]

    @staticmethod
    def _name_of(session: GameSession, sid: str) -> str:
        return session.player1_name if sid == session.player1 else session.player2_name
