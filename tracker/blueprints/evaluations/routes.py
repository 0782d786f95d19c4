from flask import jsonify, request, abort
from . import bp
from ...extensions import db
from ...errors import TrackerError, InvalidSubmission
from ...models.evaluation import Evaluation
from ...services.submission import submit_evaluation


# Helpers: coerce JSON payload values, rejecting what cannot be coerced
def _coerce_int(val, name):
    if val is None or val == "" or isinstance(val, bool):
        raise InvalidSubmission(f"{name} is required and must be an integer")
    try:
        return int(val)
    except (TypeError, ValueError):
        raise InvalidSubmission(f"{name} must be an integer") from None


def _coerce_scores(val):
    if val is None:
        return []
    if not isinstance(val, list):
        raise InvalidSubmission("scores must be a list")
    out = []
    for i, item in enumerate(val):
        if not isinstance(item, dict):
            raise InvalidSubmission(f"scores[{i}] must be an object")
        cid = _coerce_int(item.get("criteria_id"), f"scores[{i}].criteria_id")
        score = item.get("score")
        if isinstance(score, bool) or not isinstance(score, (int, float, str)):
            raise InvalidSubmission(f"scores[{i}].score must be a number")
        try:
            score = float(score)
        except ValueError:
            raise InvalidSubmission(f"scores[{i}].score must be a number") from None
        out.append((cid, score))
    return out


def _coerce_text(val):
    if val is None:
        return None
    if not isinstance(val, str):
        raise InvalidSubmission("idea_text must be a string")
    return val


@bp.errorhandler(TrackerError)
def handle_tracker_error(e):
    return jsonify(e.to_dict()), e.status_code


@bp.post("")
def create_evaluation():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise InvalidSubmission("request body must be a JSON object")

    result = submit_evaluation(
        volunteer_id=_coerce_int(payload.get("volunteer_id"), "volunteer_id"),
        month=_coerce_int(payload.get("eval_month"), "eval_month"),
        year=_coerce_int(payload.get("eval_year"), "eval_year"),
        scores=_coerce_scores(payload.get("scores")),
        idea_text=_coerce_text(payload.get("idea_text")),
    )
    return jsonify({"success": True, **result})


@bp.get("/<int:evaluation_id>")
def evaluation_detail(evaluation_id):
    ev = db.session.get(Evaluation, evaluation_id)
    if ev is None:
        abort(404)
    return jsonify({
        "id": ev.id,
        "volunteer_id": ev.volunteer_id,
        "eval_month": ev.eval_month,
        "eval_year": ev.eval_year,
        "total_score": ev.total_score,
        "percentage": ev.percentage,
        "dna_analysis": ev.dna_analysis,
        "has_award": ev.has_award,
        "created_at": ev.created_at.isoformat() if ev.created_at else None,
        "details": [
            {"criteria_id": d.criteria_id, "score": d.score} for d in ev.details
        ],
    })
