import os
import sys
import pytest

# Ensure the backend root (containing the `memorygrid` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from memorygrid.extensions import db, socketio
from memorygrid.factory import create_app
from memorygrid.services.memory import ManualScheduler
from memorygrid.services.memory.sessions import clear_sessions


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    START_DELAY_MS = 1000
    INPUT_FEEDBACK_MS = 500
    NEXT_ROUND_DELAY_MS = 1000
    DEFAULT_DIFFICULTY = 'normal'
    DISCARD_STALE_TIMERS = True
    SCHEDULER = 'manual'
    CONTROLLER_DEBOUNCE_MS = 0
    OWNER_GRACE_SEC = 0.0


class RecordingNotifier:
    """Collects engine notifications, stamped with the scheduler's virtual time."""

    def __init__(self, scheduler=None):
        self.scheduler = scheduler
        self.highlights = []
        self.state_changes = 0

    def on_highlight_changed(self, cells):
        now = self.scheduler.now_ms if self.scheduler else None
        self.highlights.append((now, list(cells)))

    def on_state_changed(self):
        self.state_changes += 1


class ScriptedRandom:
    """Returns queued values from randrange, in order."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def randrange(self, stop):
        self.calls += 1
        value = self.values.pop(0)
        assert 0 <= value < stop
        return value


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def notifier(scheduler):
    return RecordingNotifier(scheduler)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import memorygrid.models  # noqa: F401
        db.create_all()
        yield application
        clear_sessions()
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
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass
