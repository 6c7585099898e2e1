from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from tictactoe.config import Config

socketio = SocketIO(async_mode=None)


def _allowed_origins(value):
    if isinstance(value, str):
        value = [o.strip() for o in value.split(',') if o.strip()]
    if not value or value == ['*']:
        return '*'
    return list(value)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ORIGINS'))
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One coordinator per app; it owns all lobby and game state
    from tictactoe.services.games.coordinator import Coordinator
    from tictactoe.transport import SocketIOTransport
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/ws')
    flask_app.extensions['coordinator'] = Coordinator.from_config(
        SocketIOTransport(socketio, namespace),
        socketio.start_background_task,
        socketio.sleep,
        flask_app.config,
    )

    from tictactoe.main import main
    flask_app.register_blueprint(main)

    # Importing here ensures the handlers bind to the initialized socketio instance
    from tictactoe.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace)

    @click.command('serve')
    @click.option('--host', default=None, help='Interface to bind (defaults to HOST).')
    @click.option('--port', default=None, type=int, help='Port to listen on (defaults to PORT).')
    def serve_command(host, port):
        """Run the game server with Socket.IO support."""
        host = host or flask_app.config.get('HOST', '0.0.0.0')
        port = port or int(flask_app.config.get('PORT', 3001))
        flask_app.logger.info(f"[serve] tic-tac-toe tournament server on http://{host}:{port}")
        socketio.run(flask_app, host=host, port=port, allow_unsafe_werkzeug=True)

    flask_app.cli.add_command(serve_command)

    return flask_app
