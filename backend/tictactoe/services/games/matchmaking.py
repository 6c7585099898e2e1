from typing import Optional

from .registry import PlayerRegistry


class MatchmakingQueue:
    """Single waiting slot for quick matches.

    The last caller takes the slot. A waiter who became busy through some
    other path (a tournament, a rematch) is displaced rather than matched.
    """

    def __init__(self, registry: PlayerRegistry):
        self._registry = registry
        self.waiting: Optional[str] = None

    def request(self, sid: str) -> Optional[str]:
        """Return the opponent sid to pair with, or None if ``sid`` now waits.

        Callers must have checked that ``sid`` is a known idle player.
        """
        waiting = self.waiting
        if waiting is not None and waiting != sid and self._registry.is_idle(waiting):
            self.waiting = None
            return waiting
        self.waiting = sid
        return None

    def discard(self, sid: str) -> bool:
        if self.waiting == sid:
            self.waiting = None
            return True
        return False
