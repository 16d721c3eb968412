"""
Logging Configuration
Centralized logging setup for the M-Pesa relay

Console output is attached at import time. File output needs LOG_DIR,
which may come from .env, so it is attached by configure_app_logging()
once the app config has been loaded.
"""

import logging
import sys
import time
from logging.handlers import RotatingFileHandler
import os

BASE_LOGGER = 'mpesa_express'


def _ensure_log_dir(log_dir: str) -> bool:
    """Create the log directory if possible; report whether it is usable."""
    if not log_dir:
        return False
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError:
        return False
    return True


def _rotating_handler(path: str, level: int, fmt: str) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path,
        maxBytes=10485760,  # 10MB
        backupCount=10
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt='%Y-%m-%d %H:%M:%S'))
    # Marks handlers this module owns so a later app can replace them
    handler.relay_owned = True
    return handler


def _replace_file_handlers(logger: logging.Logger, handler: logging.Handler):
    for existing in [h for h in logger.handlers if getattr(h, 'relay_owned', False)]:
        logger.removeHandler(existing)
        existing.close()
    logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the relay's base logger

    The base logger ('mpesa_express') owns the handlers; everything
    below it propagates up.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger
    """
    if name != BASE_LOGGER and not name.startswith(BASE_LOGGER + '.'):
        name = f'{BASE_LOGGER}.{name}'

    base = logging.getLogger(BASE_LOGGER)

    # Only configure if not already configured
    if not base.handlers:
        base.setLevel(logging.INFO)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(logging.Formatter(
            '%(levelname)s - %(name)s - %(message)s'
        ))

        base.addHandler(console_handler)
        base.propagate = False

    return logging.getLogger(name)


def configure_app_logging(app):
    """
    Attach file logging for the Flask application

    Writes mpesa-express.log (everything from the relay) and error.log
    (Flask errors) under app.config['LOG_DIR']. Does nothing when the
    directory is empty or cannot be created.

    Args:
        app: Flask application instance
    """
    app.logger.setLevel(logging.INFO)
    base = get_logger(BASE_LOGGER)

    log_dir = app.config.get('LOG_DIR', 'logs')
    if not _ensure_log_dir(log_dir):
        return

    _replace_file_handlers(base, _rotating_handler(
        os.path.join(log_dir, 'mpesa-express.log'),
        logging.INFO,
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    _replace_file_handlers(app.logger, _rotating_handler(
        os.path.join(log_dir, 'error.log'),
        logging.ERROR,
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s\n%(pathname)s:%(lineno)d'
    ))


class RequestLogger:
    """Logs one access line per relay request, with status and duration"""

    def __init__(self, app=None):
        self.app = app
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Hook the access log into the request cycle"""
        logger = get_logger('access')

        @app.before_request
        def start_timer():
            from flask import g
            g.request_started = time.monotonic()

        @app.after_request
        def log_access(response):
            from flask import g, request
            elapsed_ms = (time.monotonic() - g.get('request_started', time.monotonic())) * 1000
            logger.info(
                '%s %s -> %s (%.1f ms, from %s)',
                request.method, request.path, response.status_code,
                elapsed_ms, request.remote_addr
            )
            return response
