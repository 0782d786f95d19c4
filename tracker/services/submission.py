"""Evaluation submission pipeline.

``submit_evaluation`` is the only writer of evaluations, their detail rows,
low-performance alerts and the volunteer's XP/rank. Everything it writes
happens in one transaction: either all of it is committed or none of it is
visible.

XP is added with an in-database increment (``xp_points = xp_points + n``)
and the rank is computed from the total read back after it, so two
submissions for the same volunteer can never overwrite each other's gain.
Where the backend supports it the volunteer row is also locked
(``SELECT ... FOR UPDATE``) from the start of the unit, which makes such
submissions run one after the other. SQLite lets them interleave until the
first write, then serializes them on its database write lock. A writer that
cannot get that lock fails with ``TransactionFailed``.
"""

import math
from contextlib import contextmanager
from typing import Iterable, List, Optional, Tuple

from flask import current_app

from ..errors import DuplicateCriterion, InvalidSubmission, TrackerError, TransactionFailed
from ..extensions import db, rq
from ..models.alert import AlertRecord
from ..models.creative_submission import CreativeSubmission
from ..models.evaluation import Evaluation, EvaluationDetail
from .alerts import DEFAULT_ALERT_THRESHOLD, build_alert
from .ranking import ladder_from_config, xp_for_percentage
from .scoring import ScoredCriterion, aggregate_scores, classify_dna
from .stores import add_experience_and_rank, get_criteria, get_experience


@contextmanager
def unit_of_work(session):
    """Commit on clean exit, roll back on any exception.

    Commit and rollback both hand the connection back to the pool.
    """
    try:
        yield session
        session.commit()
    except BaseException:
        session.rollback()
        raise


def validate_period(month, year) -> Tuple[int, int]:
    try:
        month, year = int(month), int(year)
    except (TypeError, ValueError):
        raise InvalidSubmission("eval_month and eval_year must be integers") from None
    if not 1 <= month <= 12:
        raise InvalidSubmission(f"eval_month must be between 1 and 12, got {month}")
    if year <= 0:
        raise InvalidSubmission(f"eval_year must be positive, got {year}")
    return month, year


def _normalize_scores(scores) -> List[Tuple[int, float]]:
    out = []
    seen = set()
    for item in scores or []:
        try:
            criteria_id, score = item
            criteria_id = int(criteria_id)
            score = float(score)
        except (TypeError, ValueError):
            raise InvalidSubmission(f"invalid score entry: {item!r}") from None
        if not math.isfinite(score):
            raise InvalidSubmission(f"score for criterion {criteria_id} is not a number")
        if criteria_id in seen:
            raise DuplicateCriterion(criteria_id)
        seen.add(criteria_id)
        out.append((criteria_id, score))
    return out


def resolve_scores(raw: Iterable[Tuple[int, float]], criteria) -> List[ScoredCriterion]:
    """Attach catalog metadata to raw scores and enforce score bounds."""
    scored = []
    for criteria_id, score in raw:
        c = criteria[criteria_id]
        if score < 0:
            raise InvalidSubmission(f"score for criterion {criteria_id} cannot be negative")
        if not c.is_bonus and score > c.max_score:
            raise InvalidSubmission(
                f"score {score:g} for criterion {criteria_id} exceeds its maximum of {c.max_score:g}"
            )
        scored.append(ScoredCriterion(criteria_id=criteria_id, score=score,
                                      category=c.category, max_score=c.max_score))
    return scored


def _insert_alert(session, volunteer_id: int, alert: dict) -> AlertRecord:
    row = AlertRecord(volunteer_id=volunteer_id, **alert)
    session.add(row)
    session.flush()
    return row


def submit_evaluation(volunteer_id: int, month: int, year: int, scores, idea_text: Optional[str] = None,
                      session=None) -> dict:
    """Record one evaluation and apply all of its side effects atomically.

    ``scores`` is an iterable of ``(criteria_id, score)`` pairs. Returns
    ``{"percentage", "dnaLabel", "hasAward"}``. Domain errors are raised
    as-is; any other failure is wrapped in ``TransactionFailed`` after the
    transaction has been rolled back.
    """
    session = session or db.session
    log = current_app.logger
    threshold = float(current_app.config.get("ALERT_THRESHOLD", DEFAULT_ALERT_THRESHOLD))
    ladder = ladder_from_config(current_app.config)

    has_idea = isinstance(idea_text, str) and bool(idea_text.strip())
    alert_id = None

    try:
        if isinstance(volunteer_id, bool) or not isinstance(volunteer_id, int):
            raise InvalidSubmission(f"volunteer_id must be an integer, got {volunteer_id!r}")
        month, year = validate_period(month, year)
        raw = _normalize_scores(scores)

        with unit_of_work(session):
            criteria = get_criteria(session, [cid for cid, _ in raw])
            scored = resolve_scores(raw, criteria)
            current_xp = get_experience(session, volunteer_id)

            summary = aggregate_scores(scored)
            dna = classify_dna(scored)

            ev = Evaluation(
                volunteer_id=volunteer_id,
                eval_month=month,
                eval_year=year,
                total_score=summary.total,
                percentage=summary.percentage,
                dna_analysis=dna,
                has_award=summary.has_award,
            )
            session.add(ev)
            session.flush()

            for s in scored:
                session.add(EvaluationDetail(evaluation_id=ev.id, criteria_id=s.criteria_id, score=s.score))

            if has_idea:
                session.add(CreativeSubmission(volunteer_id=volunteer_id, idea_text=idea_text))

            gained = xp_for_percentage(summary.percentage)
            new_xp, new_rank = add_experience_and_rank(session, volunteer_id, gained, ladder)

            alert = build_alert(summary.percentage, threshold)
            if alert:
                alert_id = _insert_alert(session, volunteer_id, alert).id
            session.flush()
            evaluation_id = ev.id
    except TrackerError as e:
        log.warning("evaluation rejected for volunteer %s: %s %s", volunteer_id, e.kind, e.message)
        raise
    except Exception as e:
        log.exception("evaluation transaction rolled back for volunteer %s", volunteer_id)
        raise TransactionFailed(e) from e

    log.info("evaluation %s saved for volunteer %s: %.1f%% %s xp=%s->%s rank=%s",
             evaluation_id, volunteer_id, summary.percentage, dna, current_xp, new_xp, new_rank)

    if alert_id and current_app.config.get("ALERT_NOTIFY_TO"):
        from ..jobs.notify import notify_low_performance
        rq.enqueue(notify_low_performance, alert_id)

    return {
        "percentage": summary.percentage,
        "dnaLabel": dna,
        "hasAward": summary.has_award,
    }
