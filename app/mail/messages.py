"""Compose the emails sent for an RSVP and for relay diagnostics."""
import re
from datetime import datetime
from email.utils import formataddr
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.calendar.invite import SOIREE, EventDetails
from app.core.config import Settings
from app.models import Attachment, MailMessage, Submission

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

INVITE_FILENAME = "Edge-Cases-Soiree.ics"
INVITE_MIME_TYPE = "text/calendar"
INVITE_PARAMS = {"charset": "utf-8", "method": "REQUEST"}

templates = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
)


def _one_line(value: str) -> str:
    """Collapse whitespace so user input is safe inside a header."""
    return re.sub(r"\s+", " ", value).strip()


def admin_notification(
    submission: Submission,
    settings: Settings,
    submitted_at: datetime,
    event: EventDetails = SOIREE,
) -> MailMessage:
    """Notification to the organisers listing every submitted field."""
    html = templates.get_template("admin_notification.html").render(
        name=submission.name,
        email=submission.email,
        company=submission.company,
        role=submission.role,
        edge_case_note=submission.edge_case_note,
        event=event,
        submitted_at=submitted_at.strftime("%Y-%m-%d %H:%M:%S %Z").strip(),
    )
    return MailMessage(
        sender=formataddr(("Edge Cases RSVP", settings.email_user)),
        to=settings.admin_email,
        subject=f"{event.summary} RSVP - {_one_line(submission.name)}",
        html_body=html,
    )


def confirmation(
    submission: Submission,
    settings: Settings,
    invite: str,
    event: EventDetails = SOIREE,
) -> MailMessage:
    """Confirmation to the submitter with the calendar invite attached."""
    html = templates.get_template("confirmation.html").render(
        name=submission.name,
        role=submission.role,
        event=event,
        invite_filename=INVITE_FILENAME,
    )
    return MailMessage(
        sender=formataddr((event.summary, settings.email_user)),
        to=submission.email,
        subject=f"Welcome to {event.summary} - Your AI Gathering Awaits",
        html_body=html,
        attachments=(
            Attachment(
                filename=INVITE_FILENAME,
                content=invite.encode("utf-8"),
                mime_type=INVITE_MIME_TYPE,
                params=dict(INVITE_PARAMS),
            ),
        ),
    )


def relay_test(settings: Settings, sent_at: datetime) -> MailMessage:
    """Self-addressed message used to check the relay end to end."""
    return MailMessage(
        sender=settings.email_user,
        to=settings.email_user,
        subject="Test Email from Edge Cases Server",
        html_body=templates.get_template("test_email.html").render(
            sent_at=sent_at.isoformat()
        ),
    )
