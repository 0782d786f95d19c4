from typing import Optional

from ..models.alert import ALERT_LOW_PERFORMANCE

DEFAULT_ALERT_THRESHOLD = 75.0


def should_alert(percentage: float, threshold: float = DEFAULT_ALERT_THRESHOLD) -> bool:
    return percentage < threshold


def low_performance_message(percentage: float) -> str:
    return f"Volunteer performance dropped to {percentage:.1f}%"


def build_alert(percentage: float, threshold: float = DEFAULT_ALERT_THRESHOLD) -> Optional[dict]:
    """Alert fields for a low score, or None when the score is acceptable.

    Earlier unresolved alerts are not consulted; every low score yields a
    new alert.
    """
    if not should_alert(percentage, threshold):
        return None
    return {
        "alert_type": ALERT_LOW_PERFORMANCE,
        "message": low_performance_message(percentage),
    }
