from flask import current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError
from . import bp
from ...extensions import db


@bp.get("/healthz")
def healthz():
    try:
        db.session.execute(db.text("SELECT 1"))
        db.session.rollback()
    except SQLAlchemyError:
        current_app.logger.exception("database health check failed")
        db.session.rollback()
        return jsonify({"ok": False}), 503
    return jsonify({"ok": True})
