from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import InternalServerError
import click
from config import Config
from countnum.services.rooms import RoomStore


def create_app(config_class=Config, store=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    CORS(flask_app, supports_credentials=True, origins=flask_app.config.get('CORS_ORIGINS', []))

    # One store per app; it holds every room for the life of the process
    flask_app.extensions['room_store'] = store if store is not None else RoomStore()

    @flask_app.before_request
    def log_request():
        flask_app.logger.info(f"{request.method} {request.path}")

    @flask_app.errorhandler(InternalServerError)
    def handle_internal_error(exc):
        flask_app.logger.error(f"Unhandled error: {exc.original_exception or exc}")
        return jsonify({'error': 'Internal server error'}), 500

    # Import and register blueprints here
    from countnum.main import main
    flask_app.register_blueprint(main)

    from countnum.api.rooms import rooms
    # Mount room routes under /api to match the web client
    flask_app.register_blueprint(rooms, url_prefix='/api')

    from countnum.services.rooms.cleanup import run_cleanup_once, schedule_room_cleanup
    schedule_room_cleanup(flask_app)

    @click.command('rooms-cleanup')
    def rooms_cleanup_command():
        """Expires rooms older than ROOM_MAX_AGE_MS."""
        removed = run_cleanup_once(flask_app)
        click.echo(f'Removed {removed} expired room(s).')

    @click.command('rooms-count')
    def rooms_count_command():
        """Prints the number of live rooms."""
        click.echo(str(flask_app.extensions['room_store'].get_room_count()))

    flask_app.cli.add_command(rooms_cleanup_command)
    flask_app.cli.add_command(rooms_count_command)

    return flask_app
