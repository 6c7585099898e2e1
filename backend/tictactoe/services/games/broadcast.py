from typing import Any, Dict, Optional

from tictactoe.models import GameSession
from .registry import PlayerRegistry
from .scoring import Leaderboard


class Broadcaster:
    """Build outward snapshots and hand them to the transport.

    The transport only needs ``emit(event, payload=None, to=None)``, where
    ``to=None`` means every connection. Delivery is fire-and-forget.
    """

    def __init__(self, transport, registry: PlayerRegistry, leaderboard: Leaderboard, leaderboard_size: int = 10):
        self.transport = transport
        self._registry = registry
        self._leaderboard = leaderboard
        self._leaderboard_size = leaderboard_size

    def notify(self, sid: str, event: str, payload: Optional[Dict[str, Any]] = None) -> None:
        self.transport.emit(event, payload, to=sid)

    def announce(self, event: str, payload: Optional[Dict[str, Any]] = None) -> None:
        self.transport.emit(event, payload)

    def lobby_snapshot(self, active_games: int) -> Dict[str, Any]:
        return {
            'players': [p.to_dict() for p in self._registry.all()],
            'leaderboard': [e.to_dict() for e in self._leaderboard.top(self._leaderboard_size)],
            'activeGames': active_games,
        }

    def push_lobby(self, active_games: int) -> None:
        self.announce('lobbyUpdate', self.lobby_snapshot(active_games))

    def push_game_start(self, session: GameSession) -> None:
        for sid, opponent in ((session.player1, session.player2_name), (session.player2, session.player1_name)):
            self.notify(sid, 'gameStart', {
                'gameId': session.id,
                'opponent': opponent,
                'symbol': session.symbol_for(sid),
                'yourTurn': session.current_turn == sid,
            })

    def push_game_state(self, session: GameSession) -> None:
        state = session.to_state()
        self.notify(session.player1, 'gameUpdate', state)
        self.notify(session.player2, 'gameUpdate', state)

    def push_game_end(self, session: GameSession, winner: Optional[str]) -> None:
        for sid in (session.player1, session.player2):
            if winner is None:
                result = 'draw'
            else:
                result = 'win' if sid == winner else 'loss'
            self.notify(sid, 'gameEnd', {'result': result, 'gameId': session.id})
