import threading

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from tracker.errors import (
    DuplicateCriterion,
    InvalidSubmission,
    TransactionFailed,
    UnknownCriterion,
    VolunteerNotFound,
)
from tracker.extensions import db, rq
from tracker.models import AlertRecord, CreativeSubmission, Evaluation, EvaluationDetail, Volunteer
from tracker.services import submission
from tracker.services.submission import submit_evaluation


def counts():
    return (
        Evaluation.query.count(),
        EvaluationDetail.query.count(),
        CreativeSubmission.query.count(),
        AlertRecord.query.count(),
    )


def test_low_score_submission_persists_everything(app, seeded):
    vid = seeded["volunteers"]["new"]
    c = seeded["criteria"]
    out = submit_evaluation(vid, 5, 2026, [(c["C1"], 8), (c["C2"], 6)], idea_text="Weekend clean-up drive")

    assert out == {"percentage": pytest.approx(70.0), "dnaLabel": "field-dominant", "hasAward": False}

    ev = Evaluation.query.one()
    assert ev.volunteer_id == vid
    assert (ev.eval_month, ev.eval_year) == (5, 2026)
    assert ev.total_score == 14
    assert ev.percentage == pytest.approx(70.0)
    assert ev.dna_analysis == "field-dominant"
    assert ev.has_award is False
    assert sorted((d.criteria_id, d.score) for d in ev.details) == [(c["C1"], 8), (c["C2"], 6)]
    assert sum(d.score for d in ev.details) == ev.total_score

    idea = CreativeSubmission.query.one()
    assert idea.volunteer_id == vid
    assert idea.idea_text == "Weekend clean-up drive"

    alert = AlertRecord.query.one()
    assert alert.alert_type == "low_performance"
    assert alert.message == "Volunteer performance dropped to 70.0%"
    assert alert.is_resolved is False

    v = db.session.get(Volunteer, vid)
    assert v.xp_points == 7
    assert v.rank == "beginner"


def test_high_score_gets_award_and_no_alert(app, seeded):
    vid = seeded["volunteers"]["new"]
    c = seeded["criteria"]
    out = submit_evaluation(vid, 6, 2026, [(c["C1"], 10), (c["C2"], 9)])

    assert out["percentage"] == pytest.approx(95.0)
    assert out["hasAward"] is True
    assert AlertRecord.query.count() == 0
    assert CreativeSubmission.query.count() == 0
    assert db.session.get(Volunteer, vid).xp_points == 9


def test_bonus_only_submission(app, seeded):
    vid = seeded["volunteers"]["new"]
    out = submit_evaluation(vid, 1, 2026, [(seeded["criteria"]["B1"], 5)])

    assert out == {"percentage": 0, "dnaLabel": "balanced", "hasAward": False}
    assert Evaluation.query.one().total_score == 5
    assert AlertRecord.query.count() == 1


def test_bonus_may_exceed_its_maximum(app, seeded):
    vid = seeded["volunteers"]["new"]
    c = seeded["criteria"]
    out = submit_evaluation(vid, 2, 2026, [(c["C1"], 10), (c["C2"], 10), (c["B1"], 8)])

    assert out["percentage"] == pytest.approx(140.0)
    assert db.session.get(Volunteer, vid).xp_points == 14


def test_rank_crosses_into_bronze(app, seeded):
    vid = seeded["volunteers"]["near_bronze"]
    c = seeded["criteria"]
    submit_evaluation(vid, 3, 2026, [(c["C1"], 8), (c["C2"], 8)])

    v = db.session.get(Volunteer, vid)
    assert v.xp_points == 103
    assert v.rank == "bronze"


def test_empty_scores_are_recorded(app, seeded):
    vid = seeded["volunteers"]["new"]
    out = submit_evaluation(vid, 4, 2026, [])

    assert out["percentage"] == 0
    assert Evaluation.query.count() == 1
    assert EvaluationDetail.query.count() == 0


def test_inactive_criterion_still_resolves(app, seeded):
    vid = seeded["volunteers"]["new"]
    submit_evaluation(vid, 4, 2026, [(seeded["criteria"]["X1"], 9)])
    assert EvaluationDetail.query.one().criteria_id == seeded["criteria"]["X1"]


def test_whitespace_idea_is_not_archived(app, seeded):
    vid = seeded["volunteers"]["new"]
    submit_evaluation(vid, 4, 2026, [(seeded["criteria"]["C1"], 9)], idea_text="   ")
    assert CreativeSubmission.query.count() == 0


def test_idea_text_is_archived_as_submitted(app, seeded):
    vid = seeded["volunteers"]["new"]
    submit_evaluation(vid, 4, 2026, [(seeded["criteria"]["C1"], 9)], idea_text="  Weekend drive \n")
    assert CreativeSubmission.query.one().idea_text == "  Weekend drive \n"


def test_repeated_low_scores_raise_repeated_alerts(app, seeded):
    vid = seeded["volunteers"]["new"]
    c = seeded["criteria"]
    submit_evaluation(vid, 1, 2026, [(c["C1"], 2)])
    submit_evaluation(vid, 2, 2026, [(c["C1"], 3)])
    assert AlertRecord.query.filter_by(volunteer_id=vid, is_resolved=False).count() == 2


@pytest.mark.parametrize("scores, error", [
    ([(1, 5), (1, 6)], DuplicateCriterion),
    ([(1, 5), (99, 6)], UnknownCriterion),
    ([(1, 11)], InvalidSubmission),
    ([(1, -1)], InvalidSubmission),
    ([(1, float("nan"))], InvalidSubmission),
    ([("x", 1)], InvalidSubmission),
])
def test_rejected_before_any_write(app, seeded, scores, error):
    vid = seeded["volunteers"]["new"]
    with pytest.raises(error):
        submit_evaluation(vid, 1, 2026, scores)
    assert counts() == (0, 0, 0, 0)
    assert db.session.get(Volunteer, vid).xp_points == 0


def test_unknown_volunteer(app, seeded):
    with pytest.raises(VolunteerNotFound) as exc:
        submit_evaluation(404, 1, 2026, [(seeded["criteria"]["C1"], 5)])
    assert exc.value.status_code == 404
    assert counts() == (0, 0, 0, 0)


@pytest.mark.parametrize("month, year", [(0, 2026), (13, 2026), (5, 0), ("may", 2026)])
def test_invalid_period(app, seeded, month, year):
    with pytest.raises(InvalidSubmission):
        submit_evaluation(seeded["volunteers"]["new"], month, year, [])


def test_failed_alert_insert_rolls_back_everything(app, seeded, monkeypatch):
    vid = seeded["volunteers"]["new"]
    c = seeded["criteria"]

    def broken_insert(session, volunteer_id, alert):
        raise OperationalError("INSERT INTO alerts", {}, Exception("connection lost"))

    monkeypatch.setattr(submission, "_insert_alert", broken_insert)

    with pytest.raises(TransactionFailed) as exc:
        submit_evaluation(vid, 5, 2026, [(c["C1"], 8), (c["C2"], 6)], idea_text="lost idea")

    assert isinstance(exc.value.cause, SQLAlchemyError)
    assert exc.value.status_code == 500
    assert counts() == (0, 0, 0, 0)
    v = db.session.get(Volunteer, vid)
    assert v.xp_points == 0
    assert v.rank == "beginner"


def test_failed_rank_write_rolls_back(app, seeded, monkeypatch):
    vid = seeded["volunteers"]["near_bronze"]
    c = seeded["criteria"]

    def broken_write(session, volunteer_id, gained, ladder):
        raise RuntimeError("disk full")

    monkeypatch.setattr(submission, "add_experience_and_rank", broken_write)

    with pytest.raises(TransactionFailed):
        submit_evaluation(vid, 5, 2026, [(c["C1"], 10), (c["C2"], 10)])
    assert counts() == (0, 0, 0, 0)
    assert db.session.get(Volunteer, vid).xp_points == 95


def test_session_usable_after_rollback(app, seeded, monkeypatch):
    vid = seeded["volunteers"]["new"]
    c = seeded["criteria"]
    def boom(session, volunteer_id, alert):
        raise RuntimeError("boom")

    monkeypatch.setattr(submission, "_insert_alert", boom)
    with pytest.raises(TransactionFailed):
        submit_evaluation(vid, 5, 2026, [(c["C1"], 1)])
    monkeypatch.undo()

    submit_evaluation(vid, 5, 2026, [(c["C1"], 1)])
    assert Evaluation.query.count() == 1
    assert AlertRecord.query.count() == 1


def test_alert_notification_enqueued_after_commit(app, seeded, monkeypatch):
    app.config["ALERT_NOTIFY_TO"] = "coordinator@example.org"
    app.config["SENDGRID_API_KEY"] = "test-key"
    sent = []

    def fake_send(to_email, subject, html):
        sent.append((to_email, subject, html))
        return 202, None

    monkeypatch.setattr("tracker.services.mail.send_mail", fake_send)
    # no redis in tests: the wrapper runs the job in-process
    monkeypatch.setattr(rq, "queue", None)

    vid = seeded["volunteers"]["new"]
    submit_evaluation(vid, 5, 2026, [(seeded["criteria"]["C1"], 3)])

    assert len(sent) == 1
    to_email, subject, html = sent[0]
    assert to_email == "coordinator@example.org"
    assert "Sara Haddad" in subject
    assert "30.0%" in html
    assert AlertRecord.query.one().notified_at is not None


def test_no_notification_without_alert(app, seeded, monkeypatch):
    app.config["ALERT_NOTIFY_TO"] = "coordinator@example.org"
    calls = []
    monkeypatch.setattr(rq, "enqueue", lambda *a, **k: calls.append(a))

    c = seeded["criteria"]
    submit_evaluation(seeded["volunteers"]["new"], 5, 2026, [(c["C1"], 10), (c["C2"], 10)])
    assert calls == []


def test_notification_skipped_without_sendgrid_key(app, seeded, monkeypatch):
    app.config["ALERT_NOTIFY_TO"] = "coordinator@example.org"
    monkeypatch.setattr(rq, "queue", None)
    monkeypatch.setattr("tracker.services.mail.send_mail", lambda *a: pytest.fail("mail sent without a key"))

    submit_evaluation(seeded["volunteers"]["new"], 5, 2026, [(seeded["criteria"]["C1"], 3)])
    assert AlertRecord.query.one().notified_at is None


def test_concurrent_submissions_keep_every_gain(file_app, monkeypatch):
    barrier = threading.Barrier(2, timeout=10)
    read_experience = submission.get_experience

    def read_then_wait(session, volunteer_id):
        xp = read_experience(session, volunteer_id)
        barrier.wait()
        return xp

    monkeypatch.setattr(submission, "get_experience", read_then_wait)

    results, errors = [], []

    def worker(month):
        with file_app.app_context():
            try:
                results.append(submit_evaluation(1, month, 2026, [(1, 8), (2, 8)]))
            except Exception as e:
                errors.append(e)
            finally:
                db.session.remove()

    threads = [threading.Thread(target=worker, args=(m,)) for m in (1, 2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(30)

    assert all(isinstance(e, TransactionFailed) for e in errors), errors
    assert results
    assert len(results) + len(errors) == 2
    with file_app.app_context():
        assert Evaluation.query.count() == len(results)
        v = db.session.get(Volunteer, 1)
        assert v.xp_points == 8 * len(results)
        assert v.rank == "beginner"
