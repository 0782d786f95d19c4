from flask import current_app, has_app_context

from ..extensions import db
from ..services.ranking import DEFAULT_ENTRY_TIER
from .base import TimestampMixin


def _entry_tier():
    if has_app_context():
        return current_app.config.get("RANK_ENTRY_TIER") or DEFAULT_ENTRY_TIER
    return DEFAULT_ENTRY_TIER


class Volunteer(db.Model, TimestampMixin):
    __tablename__ = "volunteers"

    id = db.Column(db.Integer, primary_key=True)
    full_name = db.Column(db.String(160), nullable=False)
    phone = db.Column(db.String(40))
    birth_date = db.Column(db.Date)
    join_date = db.Column(db.Date)
    role_type = db.Column(db.String(50))   # field/administrative
    is_active = db.Column(db.Boolean, nullable=False, default=True, server_default=db.true())
    is_frozen = db.Column(db.Boolean, nullable=False, default=False, server_default=db.false())
    freeze_reason = db.Column(db.Text)

    # gamification: written only by the evaluation submission pipeline
    xp_points = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    rank = db.Column(db.String(40), nullable=False, default=_entry_tier, server_default=DEFAULT_ENTRY_TIER)

    __table_args__ = (
        db.CheckConstraint("xp_points >= 0", name="ck_volunteers_xp_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Volunteer id={self.id} name={self.full_name!r} xp={self.xp_points} rank={self.rank}>"
