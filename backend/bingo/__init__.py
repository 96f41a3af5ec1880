from functools import partial

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)


def _allowed_origins(value):
    if not value or value.strip() == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def run_server(app, host=None, port=None, debug=False):
    """Serve the app with the Socket.IO server; used by run.py and `flask serve`."""
    host = host or app.config.get('HOST', '0.0.0.0')
    port = port or app.config.get('PORT', 3001)
    app.logger.info(f"[serve] listening on {host}:{port} debug={debug}")
    # The threading server refuses to start outside debug mode without this flag
    socketio.run(app, host=host, port=port, debug=debug, allow_unsafe_werkzeug=True)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ORIGINS'))
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One registry per app; handlers reach it through current_app
    from bingo.services.game import Room, RoomRegistry
    room_factory = partial(
        Room,
        win_threshold=int(flask_app.config.get('BINGO_WIN_THRESHOLD', 5)),
        variant=flask_app.config.get('BINGO_VARIANT', 'turns'),
        authoritative=bool(flask_app.config.get('BINGO_AUTHORITATIVE_SCORING', False)),
    )
    flask_app.extensions['bingo'] = RoomRegistry(room_factory)

    from bingo.main import main
    flask_app.register_blueprint(main)

    from bingo.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('serve')
    @click.option('--host', default=None, help='Bind address (defaults to HOST).')
    @click.option('--port', default=None, type=int, help='Port (defaults to PORT).')
    @click.option('--debug/--no-debug', default=False)
    def serve_command(host, port, debug):
        """Runs the bingo Socket.IO server."""
        run_server(flask_app, host=host, port=port, debug=debug)

    flask_app.cli.add_command(serve_command)

    return flask_app
