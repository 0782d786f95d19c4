"""Error kinds reported to callers of the evaluation pipeline.

Every error carries a ``kind`` (stable identifier), a human readable message
and the HTTP status the blueprint answers with.
"""


class TrackerError(Exception):
    kind = "TrackerError"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {"success": False, "error": self.kind, "message": self.message}


class InvalidSubmission(TrackerError):
    kind = "InvalidSubmission"


class UnknownCriterion(TrackerError):
    kind = "UnknownCriterion"

    def __init__(self, criteria_ids):
        self.criteria_ids = sorted(criteria_ids)
        ids = ", ".join(str(c) for c in self.criteria_ids)
        super().__init__(f"Unknown evaluation criteria: {ids}")


class DuplicateCriterion(TrackerError):
    kind = "DuplicateCriterion"

    def __init__(self, criteria_id):
        self.criteria_id = criteria_id
        super().__init__(f"Criterion {criteria_id} was scored more than once")


class VolunteerNotFound(TrackerError):
    kind = "VolunteerNotFound"
    status_code = 404

    def __init__(self, volunteer_id):
        self.volunteer_id = volunteer_id
        super().__init__(f"Volunteer {volunteer_id} not found")


class TransactionFailed(TrackerError):
    kind = "TransactionFailed"
    status_code = 500

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Evaluation was not saved: {cause}")
