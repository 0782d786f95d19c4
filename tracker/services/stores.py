"""Criterion catalog and volunteer store backed by the SQLAlchemy session.

Every function takes the session it should run on so the submission
coordinator can keep all reads and writes inside one transaction.
"""

from typing import Dict, Iterable, Tuple

from ..errors import UnknownCriterion, VolunteerNotFound
from ..models.criterion import EvaluationCriterion
from ..models.volunteer import Volunteer
from .ranking import rank_for_xp


def get_criteria(session, ids: Iterable[int]) -> Dict[int, EvaluationCriterion]:
    """Resolve criterion ids to catalog rows, inactive criteria included."""
    wanted = set(ids)
    if not wanted:
        return {}
    rows = session.query(EvaluationCriterion).filter(EvaluationCriterion.id.in_(wanted)).all()
    found = {c.id: c for c in rows}
    missing = wanted - set(found)
    if missing:
        raise UnknownCriterion(missing)
    return found


def lock_volunteer(session, volunteer_id: int) -> Volunteer:
    # SELECT ... FOR UPDATE where the backend has row locks (SQLite ignores it)
    v = session.query(Volunteer).filter(Volunteer.id == volunteer_id).with_for_update().first()
    if v is None:
        raise VolunteerNotFound(volunteer_id)
    return v


def get_experience(session, volunteer_id: int) -> int:
    return int(lock_volunteer(session, volunteer_id).xp_points or 0)


def add_experience_and_rank(session, volunteer_id: int, gained: int, ladder=None) -> Tuple[int, str]:
    """Add ``gained`` XP and store the rank for the resulting total.

    The increment runs in SQL (``xp_points = xp_points + :gained``), so the
    new total always builds on the latest committed value. The UPDATE holds
    the row (or, on SQLite, the database) write lock until the transaction
    ends, so the total read back afterwards is this unit's own result.
    """
    updated = (
        session.query(Volunteer)
        .filter(Volunteer.id == volunteer_id)
        .update({Volunteer.xp_points: Volunteer.xp_points + int(gained)}, synchronize_session=False)
    )
    if not updated:
        raise VolunteerNotFound(volunteer_id)

    xp = int(session.query(Volunteer.xp_points).filter(Volunteer.id == volunteer_id).scalar())
    rank = rank_for_xp(xp, ladder)
    session.query(Volunteer).filter(Volunteer.id == volunteer_id).update(
        {Volunteer.rank: rank}, synchronize_session=False
    )

    # drop the stale in-memory copy loaded by get_experience
    v = session.identity_map.get(session.identity_key(Volunteer, volunteer_id))
    if v is not None:
        session.expire(v)
    return xp, rank
