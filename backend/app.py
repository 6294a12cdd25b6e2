import logging
import os

from flask import Flask
from flask_cors import CORS

from backend.core.config import OUTBOX_SIZE
from backend.routes.control import bp as control_bp
from backend.routes.messages import bp as messages_bp
from backend.routes.viewers import bp as viewers_bp
from backend.services.meters import MeterRegistry
from backend.services.pipeline import CommandOutbox


def _configure_logging() -> None:
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    gunicorn_error = logging.getLogger("gunicorn.error")
    root = logging.getLogger()
    if gunicorn_error.handlers:
        root.handlers = gunicorn_error.handlers
        root.setLevel(level)
    else:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    logging.getLogger("werkzeug").setLevel(logging.WARNING)


def create_app(
    registry: MeterRegistry | None = None, outbox: CommandOutbox | None = None
) -> Flask:
    """Build the Flask app hosting the meters and the control outbox."""
    app = Flask(__name__)
    CORS(app)

    app.extensions["meters"] = registry if registry is not None else MeterRegistry()
    app.extensions["outbox"] = outbox if outbox is not None else CommandOutbox(OUTBOX_SIZE)

    # register routes
    app.register_blueprint(control_bp)
    app.register_blueprint(messages_bp)
    app.register_blueprint(viewers_bp)
    return app


_configure_logging()

app = create_app()
