from datetime import datetime

from flask import current_app, has_app_context

from ..extensions import db
from ..services.mail import send_alert_mail
from ..models.alert import AlertRecord
from ..models.volunteer import Volunteer


def _run_notify(alert_id: int):
    alert = db.session.get(AlertRecord, alert_id)
    if not alert:
        return None
    if alert.notified_at is not None:
        return alert.id

    to_email = current_app.config.get('ALERT_NOTIFY_TO')
    if not to_email:
        return None
    if not current_app.config.get('SENDGRID_API_KEY'):
        current_app.logger.warning('SENDGRID_API_KEY not set; skipping notification for alert %s', alert_id)
        return None

    volunteer = db.session.get(Volunteer, alert.volunteer_id)
    name = volunteer.full_name if volunteer else f"#{alert.volunteer_id}"

    status, _ = send_alert_mail(to_email, name, alert)
    current_app.logger.info('alert %s mailed to %s (status %s)', alert_id, to_email, status)
    alert.notified_at = datetime.utcnow()
    db.session.commit()
    return alert.id


def notify_low_performance(alert_id: int):
    """Job entrypoint; builds an app context when run by an RQ worker."""
    if has_app_context():
        return _run_notify(alert_id)
    from tracker import create_app
    app = create_app()
    with app.app_context():
        return _run_notify(alert_id)
