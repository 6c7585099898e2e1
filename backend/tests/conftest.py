import os
import sys
import pytest

# Ensure the backend root (containing the `tictactoe` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from tictactoe import create_app, socketio
from tictactoe.services.games.coordinator import Coordinator


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    LOG_LEVEL = 'DEBUG'
    CORS_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/ws'
    SESSION_LINGER_SEC = 0.0
    LEADERBOARD_SIZE = 10
    MIN_TOURNAMENT_PLAYERS = 2


class RecordingTransport:
    """Collects every emission as (event, payload, to)."""

    def __init__(self):
        self.sent = []

    def emit(self, event, payload=None, to=None):
        self.sent.append((event, payload, to))

    def to(self, sid, event=None):
        return [(e, p) for e, p, t in self.sent if t == sid and (event is None or e == event)]

    def broadcasts(self, event=None):
        return [(e, p) for e, p, t in self.sent if t is None and (event is None or e == event)]

    def last(self, event, sid=None):
        for e, p, t in reversed(self.sent):
            if e == event and (sid is None or t == sid):
                return p
        return None

    def clear(self):
        self.sent = []


class ManualTasks:
    """Holds background tasks until the test runs them."""

    def __init__(self):
        self.tasks = []

    def start(self, fn, *args):
        self.tasks.append((fn, args))

    def run_all(self):
        tasks, self.tasks = self.tasks, []
        for fn, args in tasks:
            fn(*args)


@pytest.fixture()
def transport():
    return RecordingTransport()


@pytest.fixture()
def tasks():
    return ManualTasks()


@pytest.fixture()
def coordinator(transport, tasks):
    return Coordinator(transport, tasks.start, sleep=lambda _: None, linger_sec=1.0)


@pytest.fixture()
def lobby(coordinator, transport):
    """Coordinator with players A, B and C joined."""
    for sid, name in (('sa', 'A'), ('sb', 'B'), ('sc', 'C')):
        assert coordinator.join(sid, name)
    transport.clear()
    return coordinator


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    created = []

    def _make():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/ws'
        )
        created.append(test_client)
        return test_client

    yield _make
    for test_client in created:
        try:
            test_client.disconnect(namespace='/ws')
        except Exception:
            pass
