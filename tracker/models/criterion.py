from ..extensions import db

CATEGORY_FIELD = "field"
CATEGORY_ADMINISTRATIVE = "administrative"
CATEGORY_BONUS = "bonus"
CATEGORIES = (CATEGORY_FIELD, CATEGORY_ADMINISTRATIVE, CATEGORY_BONUS)


class EvaluationCriterion(db.Model):
    __tablename__ = "evaluation_criteria"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(160), nullable=False)
    category = db.Column(db.String(30), nullable=False, index=True)
    max_score = db.Column(db.Float, nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True, server_default=db.true())
    display_order = db.Column(db.Integer, nullable=False, default=0, server_default="0")

    @property
    def is_bonus(self) -> bool:
        return self.category == CATEGORY_BONUS

    def __repr__(self) -> str:
        return f"<EvaluationCriterion id={self.id} category={self.category} max={self.max_score}>"
