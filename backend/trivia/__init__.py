import logging
import os
from logging.handlers import RotatingFileHandler

import click
from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
from flask_sqlalchemy import SQLAlchemy
from werkzeug.exceptions import HTTPException

from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def configure_logging(flask_app):
    """Send app logs to a rotating file alongside the console."""
    level = getattr(logging, str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    flask_app.logger.setLevel(level)
    if flask_app.config.get('TESTING') or not flask_app.config.get('LOG_TO_FILE'):
        return
    log_file = flask_app.config['LOG_FILE']
    os.makedirs(os.path.dirname(log_file), exist_ok=True)
    handler = RotatingFileHandler(
        log_file,
        maxBytes=int(flask_app.config.get('LOG_MAX_BYTES', 5 * 1024 * 1024)),
        backupCount=int(flask_app.config.get('LOG_BACKUP_COUNT', 5)),
    )
    handler.setFormatter(logging.Formatter('[%(asctime)s] %(levelname)s: %(message)s', '%Y-%m-%d %H:%M:%S'))
    handler.setLevel(level)
    flask_app.logger.addHandler(handler)


def register_error_handlers(flask_app):
    @flask_app.errorhandler(404)
    def not_found(exc):
        flask_app.logger.warning(f"[404] {request.method} {request.path}")
        return jsonify({'error': 'Not found'}), 404

    @flask_app.errorhandler(405)
    def method_not_allowed(exc):
        return jsonify({'error': 'Method not allowed'}), 405

    @flask_app.errorhandler(Exception)
    def unhandled(exc):
        if isinstance(exc, HTTPException):
            return jsonify({'error': exc.description}), exc.code
        flask_app.logger.error(f"[unhandled] {request.method} {request.path}: {exc}", exc_info=exc)
        return jsonify({'error': 'Internal server error'}), 500


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    configure_logging(flask_app)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db, directory=flask_app.config.get('MIGRATIONS_DIR', 'migrations'))
    origins = flask_app.config.get('CORS_ORIGINS') or ['*']
    if origins == ['*']:
        origins = '*'
    CORS(flask_app, origins=origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    from trivia.main import main
    flask_app.register_blueprint(main)

    from trivia.api.game import game
    flask_app.register_blueprint(game, url_prefix='/api')

    from trivia.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    register_error_handlers(flask_app)

    @flask_app.before_request
    def log_request():
        flask_app.logger.info(f"{request.method} {request.path} - IP: {request.remote_addr}")

    import trivia.models  # noqa: F401

    if flask_app.config.get('AUTO_CREATE_TABLES'):
        with flask_app.app_context():
            db.create_all()

    if flask_app.config.get('VALIDATE_CATALOG_ON_STARTUP'):
        from trivia.services.game.catalog import load_questions
        questions = load_questions(flask_app.config['QUESTIONS_FILE'])
        flask_app.logger.info(f"[startup] loaded {len(questions)} questions from {flask_app.config['QUESTIONS_FILE']}")

    @click.command('reset-game')
    def reset_game_command():
        """Replaces the game state with a fresh record."""
        from trivia.services.game.session import reset_game
        with flask_app.app_context():
            reset_game()
        print('Game has been reset!')

    @click.command('check-questions')
    def check_questions_command():
        """Loads the question catalog and reports how many questions it holds."""
        from trivia.services.game.catalog import load_questions
        questions = load_questions(flask_app.config['QUESTIONS_FILE'])
        print(f"{len(questions)} questions loaded from {flask_app.config['QUESTIONS_FILE']}")

    flask_app.cli.add_command(reset_game_command)
    flask_app.cli.add_command(check_questions_command)

    return flask_app
