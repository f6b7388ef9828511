import os
import sys
import pytest

# Ensure the backend root (containing the `countnum` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from countnum import create_app
from countnum.services.rooms import RoomStore


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = ['http://localhost:5173']
    ROOM_MAX_AGE_MS = 24 * 60 * 60 * 1000
    ROOM_CLEANUP_INTERVAL_SEC = 3600


class FakeClock:
    """Stands in for time.time so tests can step through the transfer window."""

    def __init__(self, start=1_700_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance_ms(self, ms):
        self.now += ms / 1000.0


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def store(clock):
    return RoomStore(clock=clock)


@pytest.fixture()
def flask_app(store):
    application = create_app(TestConfig, store=store)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def started_room(store):
    """A playing room with Alice (creator) and Bob."""
    room, alice = store.create_room(2, 'Alice')
    _, bob = store.join_room(room.id, 'Bob')
    store.set_player_ready(room.id, alice, True)
    store.set_player_ready(room.id, bob, True)
    store.start_game(room.id)
    return room.id, alice, bob
