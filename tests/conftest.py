import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from tracker import create_app
from tracker.extensions import db
from tracker.models import EvaluationCriterion, Volunteer


TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "SQLALCHEMY_ENGINE_OPTIONS": {},
    "ALERT_NOTIFY_TO": None,
    "SENDGRID_API_KEY": None,
    "ALERT_THRESHOLD": 75.0,
    "RANK_TIERS": "1000:diamond,500:gold,250:silver,100:bronze",
    "RANK_ENTRY_TIER": "beginner",
}


@pytest.fixture()
def app():
    app = create_app(TEST_CONFIG)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def seeded(app):
    """Two volunteers and a small catalog: C1 field, C2 administrative, B1 bonus, X1 inactive field."""
    criteria = {
        "C1": EvaluationCriterion(id=1, name="Field presence", category="field", max_score=10, display_order=1),
        "C2": EvaluationCriterion(id=2, name="Reporting", category="administrative", max_score=10, display_order=2),
        "B1": EvaluationCriterion(id=3, name="Initiative", category="bonus", max_score=5, display_order=3),
        "X1": EvaluationCriterion(id=4, name="Retired", category="field", max_score=10, is_active=False),
    }
    vols = {
        "new": Volunteer(id=1, full_name="Sara Haddad", xp_points=0, rank="beginner"),
        "near_bronze": Volunteer(id=2, full_name="Omar Nasser", xp_points=95, rank="beginner"),
    }
    db.session.add_all(list(criteria.values()) + list(vols.values()))
    db.session.commit()
    return {"criteria": {k: c.id for k, c in criteria.items()}, "volunteers": {k: v.id for k, v in vols.items()}}


@pytest.fixture()
def file_app(tmp_path):
    """App on a file-backed SQLite database so separate threads see one store."""
    config = dict(TEST_CONFIG)
    config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{tmp_path / 'volunteers.db'}"
    config["SQLALCHEMY_ENGINE_OPTIONS"] = {"connect_args": {"timeout": 2}}
    app = create_app(config)
    with app.app_context():
        db.create_all()
        db.session.add_all([
            EvaluationCriterion(id=1, name="Field presence", category="field", max_score=10),
            EvaluationCriterion(id=2, name="Reporting", category="administrative", max_score=10),
            Volunteer(id=1, full_name="Sara Haddad", xp_points=0, rank="beginner"),
        ])
        db.session.commit()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()
