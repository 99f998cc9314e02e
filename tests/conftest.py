import os
import sys
import pytest
from flask_bcrypt import Bcrypt

# Ensure the project root (containing `config` and the `voteparty` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from voteparty import create_app, socketio
from voteparty.catalog import RoundCatalog
from voteparty.commands import HostLogin
from voteparty.models import RoundDefinition
from voteparty.services.game import GameStateMachine
from voteparty.services.game.authority import HostAuthority

HOST_SECRET = 'letmein'


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    HOST_PASSWORD = HOST_SECRET
    HOST_PASSWORD_HASH = None
    BCRYPT_LOG_ROUNDS = 4
    ROUND_DURATION_SEC = 3
    POINTS_PER_CORRECT = 100
    VOTE_DEBOUNCE_MS = 0
    ROUND_LEADERBOARD_SIZE = 5
    FINAL_LEADERBOARD_SIZE = 10
    MAX_NAME_LENGTH = 12
    ROUND_CATALOG_PATH = None
    SOCKETIO_NAMESPACE = '/'
    CORS_ORIGINS = '*'
    LOG_LEVEL = 'DEBUG'


class RecordingBroadcaster:
    """Stands in for the Socket.IO broadcaster and keeps every emit."""

    def __init__(self):
        self.sent = []
        self.hosts = set()

    def to_everyone(self, event, payload=None):
        self.sent.append(('*', event, payload))

    def to_connection(self, sid, event, payload=None):
        self.sent.append((sid, event, payload))

    def to_hosts(self, event, payload=None):
        self.sent.append(('hosts', event, payload))

    def add_host(self, sid):
        self.hosts.add(sid)

    def events(self, event, to=None):
        return [payload for target, name, payload in self.sent if name == event and (to is None or target == to)]

    def clear(self):
        self.sent.clear()


class ManualClock:
    def __init__(self, now=1000.0):
        self.now = now

    def advance(self, seconds):
        self.now += seconds

    def __call__(self):
        return self.now


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    yield application


@pytest.fixture()
def live_timer_app():
    class LiveTimerConfig(TestConfig):
        ENABLE_TIMER_IN_TESTS = True

    yield create_app(LiveTimerConfig)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()


@pytest.fixture()
def host_client(flask_app):
    test_client = socketio.test_client(flask_app)
    test_client.emit('host_login', {'password': HOST_SECRET})
    test_client.get_received()  # flush
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()


@pytest.fixture()
def clock():
    return ManualClock()


@pytest.fixture(scope='session')
def hasher():
    return Bcrypt()


@pytest.fixture(scope='session')
def host_secret_hash(hasher):
    return hasher.generate_password_hash(HOST_SECRET, rounds=4)


@pytest.fixture()
def make_game(clock, hasher, host_secret_hash):
    """Build a GameStateMachine with a recording broadcaster and a logged-in host on sid 'host'."""
    def _make(rounds=(('/assets/q1.webp', 'AI'), ('/assets/q2.webp', 'REAL')), **kwargs):
        catalog = RoundCatalog(
            RoundDefinition(ordinal=i, media_reference=media, correct_choice=answer)
            for i, (media, answer) in enumerate(rounds)
        )
        kwargs.setdefault('round_duration', 3)
        game = GameStateMachine(
            catalog, RecordingBroadcaster(), HostAuthority(host_secret_hash, hasher), clock=clock, **kwargs
        )
        game.dispatch(HostLogin(sid='host', password=HOST_SECRET))
        game.broadcaster.clear()
        return game
    return _make
