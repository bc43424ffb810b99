import os
import sys
from collections import deque
import pytest

# Ensure the backend root (containing the `bingo` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from bingo import create_app, db, socketio
from bingo.notifications import NotificationSink
from bingo.services.games.ledger import InMemoryLedger
from bingo.services.games.randomness import RandomnessProvider

# Fixed epoch so timestamps never collide with the "0 means active" sentinel
T0 = 1_700_000_000.0
ADMIN_KEY = 'test-admin'


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    ENTRY_FEE = 10
    JOIN_DURATION_SEC = 60
    TURN_DURATION_SEC = 60
    MIN_ENTRY_FEE = 1
    MIN_DURATION_SEC = 1
    ADMIN_KEY = ADMIN_KEY
    LEDGER_BACKEND = 'accounts'
    RANDOM_SEED = '7'
    STARTING_BALANCE = 100


class FakeClock:
    """Seconds since T0, moved explicitly by the test."""

    def __init__(self):
        self.now = T0

    def __call__(self):
        return self.now

    def at(self, offset):
        self.now = T0 + offset

    def advance(self, seconds):
        self.now += seconds


class ScriptedRandomness(RandomnessProvider):
    """Returns queued values first, then the fallback forever."""

    def __init__(self, fallback=0):
        self.values = deque()
        self.fallback = fallback

    def queue(self, *values):
        self.values.extend(values)

    def next(self):
        if self.values:
            return self.values.popleft()
        return self.fallback


class BrokenRandomness(RandomnessProvider):
    def next(self):
        raise RuntimeError('entropy source unavailable')


class RecordingNotifier(NotificationSink):
    def __init__(self):
        self.events = []

    def emit(self, event, payload, game_id=None):
        self.events.append((event, payload))

    def names(self):
        return [name for name, _ in self.events]


def starting_balances():
    return {name: 100 for name in ('alice', 'bob', 'carol')}


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import bingo.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def randomness():
    return ScriptedRandomness()


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def ledger():
    return InMemoryLedger(starting_balances())


@pytest.fixture()
def registry(flask_app, clock, randomness, notifier, ledger):
    reg = flask_app.extensions['bingo']
    reg.clock = clock
    reg.randomness = randomness
    reg.notifier = notifier
    reg.ledger = ledger
    return reg


def draw_until_row_covered(registry, clock, randomness, game_id, host, row):
    """Queue the row's missing values and draw them one turn apart."""
    game = registry.get_session(game_id)
    drawn = game.drawn_set()
    missing = [v for v in dict.fromkeys(row) if v not in drawn]
    for value in missing:
        randomness.queue(value)
        clock.advance(game.turn_duration)
        registry.draw_number(game_id, host)
    return missing
