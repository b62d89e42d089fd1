from flask import Flask
from flask_login import LoginManager
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

login_manager = LoginManager()
socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ALLOWED_ORIGINS') or []
    login_manager.init_app(flask_app)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Import and register blueprints here
    from slopeshot.main import main
    flask_app.register_blueprint(main)

    # One registry per app: room state is owned here, not by module globals
    from slopeshot.services.games import RoomRegistry, RoundController, ShotJudge
    from slopeshot.sessions import GameSessionHandler
    from slopeshot.socketio_events import SocketIOOutbox, defer_with_socketio, register_socketio_handlers

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    outbox = SocketIOOutbox(socketio, namespace)
    registry = RoomRegistry(starting_lives=flask_app.config.get('STARTING_LIVES', 3))
    rounds = RoundController(
        registry,
        outbox,
        defer_with_socketio,
        grid_max=flask_app.config.get('GRID_MAX', 10),
        next_round_delay=flask_app.config.get('NEXT_ROUND_DELAY_SEC', 1.5),
    )
    judge = ShotJudge(registry, rounds, outbox, tolerance=flask_app.config.get('SLOPE_TOLERANCE', 0.01))
    flask_app.extensions['slopeshot'] = GameSessionHandler(
        registry, rounds, judge, outbox, lobby_code=flask_app.config.get('LOBBY_ROOM_CODE')
    )
    flask_app.extensions['slopeshot_guests'] = {}

    # Register Socket.IO event handlers
    register_socketio_handlers(namespace)

    # Flask-Login user loader: guests are kept in memory for the process lifetime
    @login_manager.user_loader
    def load_user(user_id):
        from flask import current_app
        return current_app.extensions['slopeshot_guests'].get(user_id)

    @click.command('sample-round')
    @click.option('--grid-max', type=int, default=None, help='Grid half-width (defaults to GRID_MAX).')
    @click.option('--count', type=int, default=1, show_default=True)
    def sample_round_command(grid_max, count):
        """Generates rounds and prints each target, intercept and slope."""
        from slopeshot.services.games import generate_round
        grid_max = grid_max or flask_app.config.get('GRID_MAX', 10)
        for _ in range(count):
            r = generate_round(grid_max)
            click.echo(f'target=({r.target.x}, {r.target.y}) b={r.intercept} slope={r.exact_slope} ({r.slope:g})')

    flask_app.cli.add_command(sample_round_command)

    return flask_app
