from ..extensions import db
from .base import CreatedAtMixin

ALERT_LOW_PERFORMANCE = "low_performance"


class AlertRecord(db.Model, CreatedAtMixin):
    __tablename__ = "alerts"

    id = db.Column(db.Integer, primary_key=True)
    volunteer_id = db.Column(db.Integer, db.ForeignKey("volunteers.id"), nullable=False, index=True)
    alert_type = db.Column(db.String(50), nullable=False)
    message = db.Column(db.Text, nullable=False)
    is_resolved = db.Column(db.Boolean, nullable=False, default=False, server_default=db.false())
    notified_at = db.Column(db.DateTime)

    def __repr__(self) -> str:
        return f"<AlertRecord id={self.id} volunteer_id={self.volunteer_id} type={self.alert_type}>"
