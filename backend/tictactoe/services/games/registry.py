from typing import Dict, List, Optional

from tictactoe.models import Player
from .errors import InvalidName, NameTaken


class PlayerRegistry:
    """Currently connected players, keyed by connection id (insertion ordered)."""

    def __init__(self):
        self._players: Dict[str, Player] = {}

    def register(self, sid: str, username) -> Player:
        if not isinstance(username, str) or not username.strip():
            raise InvalidName()
        if self.name_in_use(username):
            raise NameTaken()
        player = Player(sid=sid, username=username)
        self._players[sid] = player
        return player

    def unregister(self, sid: str) -> Optional[Player]:
        return self._players.pop(sid, None)

    def get(self, sid) -> Optional[Player]:
        return self._players.get(sid)

    def name_in_use(self, username: str) -> bool:
        return any(p.username == username for p in self._players.values())

    def is_idle(self, sid) -> bool:
        player = self._players.get(sid)
        return player is not None and not player.in_game

    def list_idle(self) -> List[Player]:
        return [p for p in self._players.values() if not p.in_game]

    def all(self) -> List[Player]:
        return list(self._players.values())

    def __contains__(self, sid):
        return sid in self._players

    def __len__(self):
        return len(self._players)
