import os
import sys
import pytest

# Ensure the backend root (containing the `bingo` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from bingo import create_app, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = '*'
    LOG_LEVEL = 'DEBUG'
    BINGO_WIN_THRESHOLD = 5
    BINGO_VARIANT = 'turns'
    BINGO_AUTHORITATIVE_SCORING = False
    BINGO_DRAW_INTERVAL_SEC = 0


class StrictConfig(TestConfig):
    BINGO_AUTHORITATIVE_SCORING = True


class DrawConfig(TestConfig):
    BINGO_VARIANT = 'draw'


CONFIGS = {
    'default': TestConfig,
    'strict': StrictConfig,
    'draw': DrawConfig,
}


@pytest.fixture()
def config_class(request):
    # Pick another config with parametrize('config_class', ['strict'], indirect=True)
    return CONFIGS[getattr(request, 'param', 'default')]


@pytest.fixture()
def flask_app(config_class):
    application = create_app(config_class)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def registry(flask_app):
    return flask_app.extensions['bingo']


@pytest.fixture()
def connect(flask_app):
    """Factory for Socket.IO test clients; all are disconnected on teardown."""
    clients = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass


@pytest.fixture()
def sio_client(connect):
    return connect()

