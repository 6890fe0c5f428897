"""RSVP handling: validate, build the invite, notify admin, confirm attendee."""
import logging
import re
from dataclasses import dataclass
from datetime import UTC, datetime

from app.calendar.invite import SOIREE_WINDOW, build_invite
from app.core.config import Settings
from app.core.errors import (
    InviteBuildError,
    NotificationError,
    RSVPValidationError,
    TransportError,
)
from app.mail import messages
from app.mail.dispatcher import MailDispatcher
from app.models import Submission

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
REQUIRED_FIELDS = ("name", "email", "role")


@dataclass(frozen=True)
class RSVPOutcome:
    """Message ids of both emails sent for a successful RSVP."""
    admin_message_id: str
    confirmation_message_id: str


def validate_submission(submission: Submission) -> None:
    """
    Check required fields and the email shape.

    Whitespace-only values count as missing.

    Raises:
        RSVPValidationError: "Missing required fields" or "Invalid email format".
    """
    missing = [
        field for field in REQUIRED_FIELDS
        if not (getattr(submission, field) or "").strip()
    ]
    if missing:
        logger.warning(f"RSVP rejected, missing fields: {missing}")
        raise RSVPValidationError("Missing required fields")

    if not EMAIL_PATTERN.fullmatch(submission.email):
        logger.warning(f"RSVP rejected, invalid email format: {submission.email!r}")
        raise RSVPValidationError("Invalid email format")


async def submit_rsvp(
    submission: Submission,
    settings: Settings,
    dispatcher: MailDispatcher,
    now: datetime | None = None,
) -> RSVPOutcome:
    """
    Handle one RSVP from validation through both notification emails.

    The steps run strictly in order. The admin notification goes out first
    and the confirmation is only attempted once it succeeded. If the
    confirmation then fails the admin has already been told about an RSVP
    the attendee never got confirmed; that case is still reported as a
    failure.

    Raises:
        RSVPValidationError: the submission is incomplete or malformed.
        InviteBuildError: the calendar invite could not be generated.
        NotificationError: either email failed, with ``leg`` naming which.
    """
    validate_submission(submission)
    now = now or datetime.now(UTC)

    try:
        invite = build_invite(
            submission.name, submission.email, window=SOIREE_WINDOW, generated_at=now
        )
    except InviteBuildError:
        raise
    except Exception as e:
        raise InviteBuildError(f"Calendar invite generation failed: {e}") from e
    logger.debug("Calendar invite created")

    admin_message = messages.admin_notification(submission, settings, submitted_at=now)
    confirmation_message = messages.confirmation(submission, settings, invite)

    try:
        admin_id = await dispatcher.send(admin_message)
    except TransportError as e:
        raise NotificationError(NotificationError.ADMIN, e) from e
    logger.info(f"Admin email sent: {admin_id}")

    try:
        confirmation_id = await dispatcher.send(confirmation_message)
    except TransportError as e:
        logger.warning(
            f"Admin was notified ({admin_id}) but confirmation to "
            f"{confirmation_message.to} failed"
        )
        raise NotificationError(NotificationError.CONFIRMATION, e) from e
    logger.info(f"Confirmation email sent: {confirmation_id}")

    return RSVPOutcome(admin_message_id=admin_id, confirmation_message_id=confirmation_id)
