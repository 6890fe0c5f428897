"""Operational endpoints for checking configuration and the mail relay."""
import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.core.config import Settings, get_settings
from app.mail import messages
from app.mail.dispatcher import MailDispatcher, get_mail_dispatcher

logger = logging.getLogger(__name__)

router = APIRouter(tags=["diagnostics"])


def _presence(value: str) -> str:
    return "configured" if value else "missing"


@router.get("/health")
async def health(settings: Settings = Depends(get_settings)):
    """
    Health check endpoint.

    Reports whether relay credentials are set, never their values.
    """
    return {
        "status": "OK",
        "timestamp": datetime.now(UTC).isoformat(),
        "env": {
            "ENVIRONMENT": settings.environment,
            "EMAIL_USER": _presence(settings.email_user),
            "EMAIL_PASS": _presence(settings.email_pass),
        },
    }


@router.get("/env-check")
async def env_check(settings: Settings = Depends(get_settings)):
    """List which required environment variables are missing or configured."""
    missing = settings.missing_variables()
    return {
        "status": "OK" if not missing else "Missing Variables",
        "missing": missing,
        "configured": settings.configured_variables(),
    }


@router.post("/test-email")
async def send_test_email(
    settings: Settings = Depends(get_settings),
    dispatcher: MailDispatcher = Depends(get_mail_dispatcher),
):
    """
    Send a test message from the relay account to itself.

    Exercises the whole send path and returns the relay's message id.
    """
    logger.info("Testing email configuration")
    try:
        message_id = await dispatcher.send(
            messages.relay_test(settings, sent_at=datetime.now(UTC))
        )
    except Exception as e:
        logger.error(f"Test email failed: {e}")
        return JSONResponse(
            status_code=500, content={"error": "Test email failed", "details": str(e)}
        )

    return {
        "success": True,
        "message": "Test email sent successfully!",
        "messageId": message_id,
    }
