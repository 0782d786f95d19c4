from .volunteer import Volunteer
from .criterion import EvaluationCriterion
from .evaluation import Evaluation, EvaluationDetail
from .alert import AlertRecord
from .creative_submission import CreativeSubmission
# base mixins are imported by the above as needed
