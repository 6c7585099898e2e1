import logging
import threading
import time
from typing import Any, Dict, Optional

from .broadcast import Broadcaster
from .errors import CoordinatorError
from .matchmaking import MatchmakingQueue
from .registry import PlayerRegistry
from .scheduler import DeferredTasks
from .scoring import Leaderboard
from .sessions import SessionManager
from .tournament import TournamentScheduler

logger = logging.getLogger(__name__)


class Coordinator:
    """Entry point for every inbound player intent.

    All registry, queue, session and leaderboard state lives here and is only
    touched under ``self.lock``, so each event is applied atomically with
    respect to the others. Rejections (``CoordinatorError``) are reported to
    the requesting connection as an ``error`` event; every other bad input is
    ignored.
    """

    def __init__(
        self,
        transport,
        start_task,
        sleep=time.sleep,
        linger_sec: float = 1.0,
        leaderboard_size: int = 10,
        min_tournament_players: int = 2,
        shuffle=None,
    ):
        self.lock = threading.RLock()
        self.registry = PlayerRegistry()
        self.leaderboard = Leaderboard()
        self.queue = MatchmakingQueue(self.registry)
        self.broadcast = Broadcaster(transport, self.registry, self.leaderboard, leaderboard_size)
        self.deferred = DeferredTasks(start_task, sleep)
        self.sessions = SessionManager(
            self.registry,
            self.leaderboard,
            self.queue,
            self.broadcast,
            self.deferred,
            linger_sec=linger_sec,
            lock=self.lock,
        )
        tournament_kwargs = {'min_players': min_tournament_players}
        if shuffle is not None:
            tournament_kwargs['shuffle'] = shuffle
        self.tournament = TournamentScheduler(self.registry, self.sessions, self.broadcast, **tournament_kwargs)

    @classmethod
    def from_config(cls, transport, start_task, sleep, config):
        return cls(
            transport,
            start_task,
            sleep=sleep,
            linger_sec=float(config.get('SESSION_LINGER_SEC', 1.0)),
            leaderboard_size=int(config.get('LEADERBOARD_SIZE', 10)),
            min_tournament_players=int(config.get('MIN_TOURNAMENT_PLAYERS', 2)),
        )

    # ---- inbound events ----

    def join(self, sid: str, username) -> bool:
        with self.lock:
            if sid in self.registry:
                logger.debug(f"[join-ignored] sid={sid} already joined")
                return False
            try:
                player = self.registry.register(sid, username)
            except CoordinatorError as exc:
                self.broadcast.notify(sid, 'error', {'message': exc.message})
                return False
            self.leaderboard.ensure(player.username)
            self.broadcast.notify(sid, 'joined', {'username': player.username})
            self._push_lobby()
            logger.info(f"[join] {player.username} sid={sid}")
            return True

    def find_match(self, sid: str) -> None:
        with self.lock:
            if not self.registry.is_idle(sid):
                return
            opponent = self.queue.request(sid)
            if opponent is None:
                self.broadcast.notify(sid, 'waiting', {'message': 'Searching for opponent...'})
                return
            self.sessions.start(opponent, sid)

    def cancel_search(self, sid: str) -> None:
        with self.lock:
            self.queue.discard(sid)
            self.broadcast.notify(sid, 'searchCancelled')

    def make_move(self, sid: str, session_id, position) -> bool:
        with self.lock:
            return self.sessions.apply_move(session_id, sid, position)

    def start_tournament(self, sid: str) -> bool:
        with self.lock:
            try:
                self.tournament.start()
            except CoordinatorError as exc:
                self.broadcast.notify(sid, 'error', {'message': exc.message})
                return False
            return True

    def request_rematch(self, sid: str, session_id) -> bool:
        with self.lock:
            return self.sessions.request_rematch(session_id, sid)

    def accept_rematch(self, sid: str, requester_id) -> bool:
        with self.lock:
            return self.sessions.accept_rematch(sid, requester_id) is not None

    def chat(self, sid: str, message) -> bool:
        with self.lock:
            player = self.registry.get(sid)
            if player is None or not isinstance(message, str):
                return False
            self.broadcast.announce('chatMessage', {
                'username': player.username,
                'message': message,
                'timestamp': int(time.time() * 1000),
            })
            return True

    def disconnect(self, sid: str) -> None:
        with self.lock:
            self.sessions.handle_disconnect(sid)
            player = self.registry.unregister(sid)
            self.queue.discard(sid)
            if player:
                logger.info(f"[disconnect] {player.username} sid={sid}")
            self._push_lobby()

    # ---- snapshots ----

    def lobby_snapshot(self) -> Dict[str, Any]:
        with self.lock:
            return self.broadcast.lobby_snapshot(self.sessions.active_count())

    def game_state_snapshot(self, session_id) -> Optional[Dict[str, Any]]:
        with self.lock:
            session = self.sessions.get(session_id)
            return session.to_state() if session else None

    def leaderboard_snapshot(self):
        with self.lock:
            return [e.to_dict() for e in self.leaderboard.ranked()]

    def bracket_snapshot(self):
        with self.lock:
            return [list(pair) for pair in self.tournament.bracket]

    def _push_lobby(self) -> None:
        self.broadcast.push_lobby(self.sessions.active_count())
