from ..extensions import db
from .base import CreatedAtMixin

class Evaluation(db.Model, CreatedAtMixin):
    """Immutable record of one monthly evaluation."""
    __tablename__ = "evaluations"

    id = db.Column(db.Integer, primary_key=True)
    volunteer_id = db.Column(db.Integer, db.ForeignKey("volunteers.id"), nullable=False, index=True)
    eval_month = db.Column(db.Integer, nullable=False)
    eval_year = db.Column(db.Integer, nullable=False)
    total_score = db.Column(db.Float, nullable=False, default=0)
    percentage = db.Column(db.Float, nullable=False, default=0)
    dna_analysis = db.Column(db.String(40), nullable=False)
    has_award = db.Column(db.Boolean, nullable=False, default=False)

    details = db.relationship("EvaluationDetail", backref="evaluation", lazy="select",
                              order_by="EvaluationDetail.id")

    def __repr__(self) -> str:
        return f"<Evaluation id={self.id} volunteer_id={self.volunteer_id} {self.eval_year}-{self.eval_month:02d}>"


class EvaluationDetail(db.Model):
    __tablename__ = "evaluation_details"

    id = db.Column(db.Integer, primary_key=True)
    evaluation_id = db.Column(db.Integer, db.ForeignKey("evaluations.id"), nullable=False, index=True)
    criteria_id = db.Column(db.Integer, db.ForeignKey("evaluation_criteria.id"), nullable=False)
    score = db.Column(db.Float, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("evaluation_id", "criteria_id", name="uq_evaluation_details_eval_criteria"),
    )
