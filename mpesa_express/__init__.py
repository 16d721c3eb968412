from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from mpesa_express.config import config, load_environment, read_environment, MpesaSettings
from mpesa_express.errors import AppError, ConfigurationError
from mpesa_express.providers import init_provider
from mpesa_express.utils.logger import get_logger, configure_app_logging, RequestLogger

logger = get_logger(__name__)


def create_app(config_name='default', overrides=None):
    """
    Application factory pattern

    Args:
        config_name: Deployment profile ('primary', 'echo', 'testing')
        overrides: Extra config values applied last (used by tests)

    Raises:
        ConfigurationError: If the .env file or a required credential is missing
    """
    if config_name not in config:
        raise ConfigurationError(f'Unknown profile: {config_name}')

    app = Flask(__name__)

    # Load configuration
    profile = config[config_name]
    app.config.from_object(profile)
    if profile.LOAD_DOTENV:
        load_environment()
        app.config.update(read_environment())
    if overrides:
        app.config.update(overrides)

    settings = MpesaSettings.from_config(app.config)
    init_provider(app, settings)

    configure_app_logging(app)
    RequestLogger(app)
    CORS(app)

    # Register blueprints
    from mpesa_express.api import register_blueprints
    register_blueprints(app)

    # Error handlers
    register_error_handlers(app)

    logger.info(
        f'{app.config["SERVICE_NAME"]} configured ({config_name}, '
        f'callback mode: {app.config["CALLBACK_MODE"]}, callback URL: {settings.callback_url})'
    )
    return app


def register_error_handlers(app):
    """Register error handlers"""

    @app.errorhandler(AppError)
    def app_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def http_error(error):
        return jsonify({'error': error.name, 'message': error.description}), error.code

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f'Unhandled error: {error}')
        return jsonify({'error': 'Internal server error'}), 500
