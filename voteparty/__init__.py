from flask import Flask, current_app
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

bcrypt = Bcrypt()
socketio = SocketIO(async_mode=None)

EXTENSION_KEY = 'voteparty'


def get_game():
    """The GameStateMachine bound to the current app."""
    return current_app.extensions[EXTENSION_KEY]


def _parse_origins(value):
    if not value or value.strip() == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper())

    allowed_origins = _parse_origins(flask_app.config.get('CORS_ORIGINS'))
    bcrypt.init_app(flask_app)
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from voteparty.broadcast import Broadcaster
    from voteparty.catalog import RoundCatalog
    from voteparty.services.game import GameStateMachine
    from voteparty.services.game.authority import HostAuthority

    catalog = RoundCatalog.from_json(flask_app.config.get('ROUND_CATALOG_PATH'))
    password_hash = flask_app.config.get('HOST_PASSWORD_HASH') or bcrypt.generate_password_hash(
        flask_app.config['HOST_PASSWORD'])
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')

    # Tests drive timer ticks by hand unless explicitly asked for a live timer
    start_task = socketio.start_background_task
    if flask_app.config.get('TESTING') and not flask_app.config.get('ENABLE_TIMER_IN_TESTS'):
        start_task = None

    game = GameStateMachine.from_config(
        flask_app.config,
        catalog,
        Broadcaster(socketio, namespace=namespace),
        HostAuthority(password_hash, bcrypt),
        start_task=start_task,
        sleep=socketio.sleep,
        logger=flask_app.logger,
    )
    flask_app.extensions[EXTENSION_KEY] = game
    flask_app.logger.info(f"[startup] rounds={len(catalog)} namespace={namespace}")

    from voteparty.main import main
    flask_app.register_blueprint(main)

    # Importing here ensures the handlers bind to the initialized socketio instance
    from voteparty.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    @click.command('hash-host-password')
    @click.argument('password')
    def hash_host_password_command(password):
        """Print a bcrypt hash to use as HOST_PASSWORD_HASH."""
        click.echo(bcrypt.generate_password_hash(password).decode('utf-8'))

    @click.command('check-catalog')
    def check_catalog_command():
        """Load the configured round catalog and list its rounds."""
        loaded = RoundCatalog.from_json(flask_app.config.get('ROUND_CATALOG_PATH'))
        for round_def in loaded:
            click.echo(f"{round_def.ordinal + 1:>3}  {round_def.correct_choice:<6} {round_def.media_reference}")
        click.echo(f"{len(loaded)} rounds")

    flask_app.cli.add_command(hash_host_password_command)
    flask_app.cli.add_command(check_catalog_command)

    return flask_app
