"""RSVP submission route."""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.core.config import Settings, get_settings
from app.core.errors import NotificationError, RSVPValidationError, TransportErrorKind
from app.mail.dispatcher import MailDispatcher, get_mail_dispatcher
from app.models import Submission
from app.rsvp.service import submit_rsvp

logger = logging.getLogger(__name__)

router = APIRouter(tags=["rsvp"])

SUCCESS_MESSAGE = "RSVP submitted successfully! Check your email for confirmation."
GENERIC_ERROR = "Failed to submit RSVP. Please try again."
ERROR_MESSAGES = {
    TransportErrorKind.AUTHENTICATION: "Email authentication failed. Please check server configuration.",
    TransportErrorKind.NETWORK: "Network error occurred. Please try again.",
    TransportErrorKind.RECIPIENT: "Invalid recipient email address.",
}


def error_response(error: Exception, settings: Settings) -> JSONResponse:
    """Shape a 500 response, echoing the raw error only in development."""
    message = GENERIC_ERROR
    if isinstance(error, NotificationError):
        message = ERROR_MESSAGES.get(error.kind, GENERIC_ERROR)

    content = {"error": message}
    if settings.is_development:
        content["details"] = str(error)
    return JSONResponse(status_code=500, content=content)


@router.post("/rsvp")
async def create_rsvp(
    submission: Submission,
    settings: Settings = Depends(get_settings),
    dispatcher: MailDispatcher = Depends(get_mail_dispatcher),
):
    """
    Accept an RSVP for the soirée.

    Validates the submission, emails the organisers, then emails the
    attendee a confirmation with a calendar invite attached. Returns 400
    for incomplete or malformed submissions and 500 if either email
    could not be sent.
    """
    logger.info(f"RSVP request received from {submission.email!r}")
    try:
        await submit_rsvp(submission, settings, dispatcher)
    except RSVPValidationError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except Exception as e:
        logger.exception(f"RSVP failed: {e}")
        return error_response(e, settings)

    logger.info("Both emails sent successfully")
    return {"success": True, "message": SUCCESS_MESSAGE}
