"""Outbound mail through the configured SMTP relay."""
import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formatdate, make_msgid

from fastapi import Depends
from starlette.concurrency import run_in_threadpool

from app.core.config import Settings, get_settings
from app.core.errors import TransportError, TransportErrorKind
from app.models import MailMessage

logger = logging.getLogger(__name__)


def classify_transport_error(exc: BaseException) -> TransportErrorKind:
    """Map an exception raised during an SMTP exchange to an error kind.

    smtplib exception types decide where they can. Only exceptions with no
    distinguishing type fall back to matching on the message text.
    """
    if isinstance(exc, smtplib.SMTPAuthenticationError):
        return TransportErrorKind.AUTHENTICATION
    if isinstance(exc, smtplib.SMTPRecipientsRefused):
        return TransportErrorKind.RECIPIENT
    if isinstance(exc, (smtplib.SMTPConnectError, smtplib.SMTPServerDisconnected)):
        return TransportErrorKind.NETWORK
    # SMTPException subclasses OSError
    if isinstance(exc, OSError) and not isinstance(exc, smtplib.SMTPException):
        return TransportErrorKind.NETWORK

    text = str(exc).lower()
    if "auth" in text:
        return TransportErrorKind.AUTHENTICATION
    if "network" in text or "timeout" in text or "timed out" in text:
        return TransportErrorKind.NETWORK
    if "recipient" in text:
        return TransportErrorKind.RECIPIENT
    return TransportErrorKind.UNKNOWN


class MailDispatcher:
    """Send rendered messages through one SMTP relay.

    A fresh connection is opened per message and nothing is retried: a
    failure is raised to the caller as a TransportError straight away.
    The blocking SMTP exchange runs in the threadpool so a pending send
    suspends only the request that issued it.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def _tls_context(self) -> ssl.SSLContext:
        context = ssl.create_default_context()
        if not self.settings.smtp_verify_tls:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context

    def _connect(self) -> smtplib.SMTP:
        """Open an authenticated connection to the relay."""
        s = self.settings
        if s.smtp_ssl:
            server = smtplib.SMTP_SSL(
                s.smtp_host, s.smtp_port, timeout=s.smtp_timeout, context=self._tls_context()
            )
        else:
            server = smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=s.smtp_timeout)
        try:
            if not s.smtp_ssl:
                server.starttls(context=self._tls_context())
            if s.email_user:
                server.login(s.email_user, s.email_pass)
        except Exception:
            server.close()
            raise
        return server

    def build_mime(self, message: MailMessage) -> EmailMessage:
        """Render a MailMessage as a MIME message with a fresh Message-ID."""
        mime = EmailMessage()
        mime["From"] = message.sender
        mime["To"] = message.to
        mime["Subject"] = message.subject
        mime["Date"] = formatdate(localtime=False)
        mime["Message-ID"] = make_msgid(domain=self._msgid_domain())
        mime.set_content(message.html_body, subtype="html")
        for attachment in message.attachments:
            mime.add_attachment(
                attachment.content,
                maintype=attachment.maintype,
                subtype=attachment.subtype,
                filename=attachment.filename,
                params=attachment.params,
            )
        return mime

    def _msgid_domain(self) -> str | None:
        _, _, domain = self.settings.email_user.partition("@")
        return domain or None

    def _deliver(self, mime: EmailMessage) -> None:
        with self._connect() as server:
            server.send_message(mime)

    def _check(self) -> None:
        with self._connect() as server:
            server.noop()

    async def send(self, message: MailMessage) -> str:
        """
        Send one message and return its Message-ID.

        Raises:
            TransportError: if the relay could not be reached or refused
                the message.
        """
        try:
            mime = self.build_mime(message)
            await run_in_threadpool(self._deliver, mime)
        except Exception as e:
            kind = classify_transport_error(e)
            logger.error(f"Sending '{message.subject}' to {message.to} failed ({kind.value}): {e}")
            raise TransportError(kind, str(e)) from e

        message_id = mime["Message-ID"]
        logger.info(f"Sent '{message.subject}' to {message.to}: {message_id}")
        return message_id

    async def verify(self) -> None:
        """
        Connect and authenticate against the relay without sending.

        Raises:
            TransportError: if the relay is unreachable or rejects the login.
        """
        try:
            await run_in_threadpool(self._check)
        except Exception as e:
            raise TransportError(classify_transport_error(e), str(e)) from e


def get_mail_dispatcher(settings: Settings = Depends(get_settings)) -> MailDispatcher:
    """Dependency for getting a dispatcher bound to the current settings."""
    return MailDispatcher(settings)
