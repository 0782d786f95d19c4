from ..extensions import db
from .base import CreatedAtMixin

class CreativeSubmission(db.Model, CreatedAtMixin):
    __tablename__ = "creative_vault"

    id = db.Column(db.Integer, primary_key=True)
    volunteer_id = db.Column(db.Integer, db.ForeignKey("volunteers.id"), nullable=False, index=True)
    idea_text = db.Column(db.Text, nullable=False)
