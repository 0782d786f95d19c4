from html import escape

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail
from flask import current_app


def send_mail(to_email, subject, html):
    sg = SendGridAPIClient(api_key=current_app.config['SENDGRID_API_KEY'])
    message = Mail(from_email=(current_app.config['MAIL_FROM'], current_app.config['MAIL_FROM_NAME']),
                   to_emails=to_email,
                   subject=subject,
                   html_content=html)
    resp = sg.send(message)
    return resp.status_code, getattr(resp, 'headers', None)


def build_alert_mail(volunteer_name, alert):
    """Subject and HTML body for an alert; volunteer text is escaped."""
    subject = f"Performance alert: {volunteer_name}"
    created = alert.created_at.strftime('%Y-%m-%d %H:%M') if alert.created_at else ''
    body = (
        f"<p><strong>{escape(volunteer_name)}</strong></p>"
        f"<p>{escape(alert.message)}</p>"
        f"<p>Alert #{alert.id} ({escape(alert.alert_type)}) raised {created}</p>"
    )
    return subject, body


def send_alert_mail(to_email, volunteer_name, alert):
    subject, body = build_alert_mail(volunteer_name, alert)
    return send_mail(to_email, subject, body)
