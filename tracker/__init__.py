import logging

from flask import Flask
from flask_migrate import Migrate
from .extensions import db, rq
from .services.ranking import ladder_from_config

migrate = Migrate(directory="alembic")


def create_app(test_config=None):
    """App factory.

    ``test_config`` is applied on top of ``config.Config`` before any
    extension reads the configuration.
    """
    app = Flask(__name__)
    app.config.from_object('config.Config')
    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    # fail at startup rather than on the first submission
    ladder_from_config(app.config)

    db.init_app(app)
    migrate.init_app(app, db)
    rq.init_app(app)

    from . import models  # noqa: F401

    from .blueprints.evaluations import bp as evaluations_bp
    app.register_blueprint(evaluations_bp, url_prefix="/api/evaluations")

    from .blueprints.health import bp as health_bp
    app.register_blueprint(health_bp)

    return app
