import os
import random
import sys
import pytest

# Ensure the backend root (containing the `slopeshot` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from slopeshot import create_app, socketio
from slopeshot.services.games import RoomRegistry, RoundController, ShotJudge
from slopeshot.sessions import GameSessionHandler


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    GRID_MAX = 10
    SLOPE_TOLERANCE = 0.01
    NEXT_ROUND_DELAY_SEC = 0
    STARTING_LIVES = 3
    LOBBY_ROOM_CODE = None
    SOCKETIO_NAMESPACE = '/'
    CORS_ALLOWED_ORIGINS = ['http://localhost:3000']
    LOG_LEVEL = 'DEBUG'


class LobbyTestConfig(TestConfig):
    LOBBY_ROOM_CODE = 'lobby'


class RecordingOutbox:
    """Captures everything the core tries to send."""

    def __init__(self):
        self.sent = []
        self.subscriptions = []

    def to_room(self, code, event, payload=None):
        self.sent.append(('room', code, event, payload))

    def to_player(self, player_id, event, payload=None):
        self.sent.append(('player', player_id, event, payload))

    def subscribe(self, player_id, code):
        self.subscriptions.append((player_id, code))

    def events(self, scope=None, target=None):
        return [
            (event, payload) for s, t, event, payload in self.sent
            if (scope is None or s == scope) and (target is None or t == target)
        ]

    def names(self, scope=None, target=None):
        return [event for event, _ in self.events(scope, target)]

    def clear(self):
        self.sent.clear()


class ManualScheduler:
    """Holds deferred calls until the test fires them."""

    def __init__(self):
        self.pending = []

    def __call__(self, delay_sec, fn, *args):
        self.pending.append((delay_sec, fn, args))

    def run_all(self):
        pending, self.pending = self.pending, []
        for _, fn, args in pending:
            fn(*args)


@pytest.fixture()
def outbox():
    return RecordingOutbox()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def registry():
    return RoomRegistry(starting_lives=3, rng=random.Random(1234))


@pytest.fixture()
def rounds(registry, outbox, scheduler):
    return RoundController(registry, outbox, scheduler, grid_max=10, next_round_delay=1.5, rng=random.Random(99))


@pytest.fixture()
def judge(registry, rounds, outbox):
    return ShotJudge(registry, rounds, outbox, tolerance=0.01)


@pytest.fixture()
def sessions(registry, rounds, judge, outbox):
    return GameSessionHandler(registry, rounds, judge, outbox)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def lobby_app():
    application = create_app(LobbyTestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_sio_client(flask_app):
    created = []

    def _make(flask_test_client=None):
        test_client = socketio.test_client(flask_app, flask_test_client=flask_test_client)
        created.append(test_client)
        return test_client

    yield _make
    for test_client in created:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
