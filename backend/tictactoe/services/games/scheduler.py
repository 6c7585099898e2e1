import itertools
import logging
import threading
import time
from typing import Callable, Dict


logger = logging.getLogger(__name__)


class DeferredTasks:
    """One-shot timers keyed by an id.

    - Scheduling the same key again supersedes the earlier timer
    - ``cancel`` makes a pending timer no-op when it wakes up
    - Work runs on ``start_task`` (``socketio.start_background_task`` in the app)
    """

    def __init__(self, start_task: Callable, sleep: Callable[[float], None] = time.sleep):
        self._start_task = start_task
        self._sleep = sleep
        self._tokens = itertools.count(1)
        self._pending: Dict[str, int] = {}
        self._lock = threading.Lock()

    def schedule(self, key: str, delay_sec: float, callback: Callable[[str], None]) -> None:
        with self._lock:
            token = next(self._tokens)
            self._pending[key] = token
        deadline = time.time() + max(0.0, delay_sec)
        logger.debug(f"[timer-set] key={key} delay={delay_sec}s")

        def _runner(k: str, expected: int, dl: float):
            sleep_for = max(0.0, dl - time.time())
            if sleep_for:
                self._sleep(sleep_for)
            with self._lock:
                if self._pending.get(k) != expected:
                    logger.debug(f"[timer-abort] key={k} cancelled or superseded")
                    return
                del self._pending[k]
            logger.debug(f"[timer-fire] key={k}")
            callback(k)

        self._start_task(_runner, key, token, deadline)

    def cancel(self, key: str) -> bool:
        with self._lock:
            return self._pending.pop(key, None) is not None

    def is_pending(self, key: str) -> bool:
        with self._lock:
            return key in self._pending
