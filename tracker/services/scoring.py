"""Score aggregation and DNA classification for one evaluation.

Both functions are pure: they take the scored criteria of a single
submission (already resolved against the criterion catalog) and never touch
storage.
"""

from dataclasses import dataclass
from typing import Iterable, List

from ..errors import DuplicateCriterion
from ..models.criterion import CATEGORY_ADMINISTRATIVE, CATEGORY_BONUS, CATEGORY_FIELD

DNA_FIELD = "field-dominant"
DNA_ADMINISTRATIVE = "administrative-dominant"
DNA_BALANCED = "balanced"

AWARD_THRESHOLD = 90.0


@dataclass(frozen=True)
class ScoredCriterion:
    criteria_id: int
    score: float
    category: str
    max_score: float

    @property
    def is_bonus(self) -> bool:
        return self.category == CATEGORY_BONUS


@dataclass(frozen=True)
class ScoreSummary:
    total: float
    denominator: float
    percentage: float

    @property
    def has_award(self) -> bool:
        return has_award(self.percentage)


def ensure_distinct(scores: Iterable[ScoredCriterion]) -> List[ScoredCriterion]:
    seen = set()
    out = []
    for s in scores:
        if s.criteria_id in seen:
            raise DuplicateCriterion(s.criteria_id)
        seen.add(s.criteria_id)
        out.append(s)
    return out


def aggregate_scores(scores: Iterable[ScoredCriterion]) -> ScoreSummary:
    """Sum awarded points and express them as a percentage.

    Bonus criteria add to the total but not to the denominator, so a
    volunteer can go past 100%. With no non-bonus criterion the percentage
    is 0 whatever the total.
    """
    scores = ensure_distinct(scores)
    total = sum(float(s.score) for s in scores)
    denominator = sum(float(s.max_score) for s in scores if not s.is_bonus)
    if denominator > 0:
        percentage = max(0.0, 100.0 * total / denominator)
    else:
        percentage = 0.0
    return ScoreSummary(total=total, denominator=denominator, percentage=percentage)


def classify_dna(scores: Iterable[ScoredCriterion]) -> str:
    field_score = 0.0
    admin_score = 0.0
    for s in scores:
        if s.category == CATEGORY_FIELD:
            field_score += float(s.score)
        elif s.category == CATEGORY_ADMINISTRATIVE:
            admin_score += float(s.score)
    if field_score > admin_score:
        return DNA_FIELD
    if admin_score > field_score:
        return DNA_ADMINISTRATIVE
    return DNA_BALANCED


def has_award(percentage: float) -> bool:
    return percentage >= AWARD_THRESHOLD
