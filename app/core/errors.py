"""Error taxonomy for RSVP handling.

Validation errors are the client's fault and map to 400 responses; every
other error here surfaces as a 500 with a message chosen from the
transport error kind.
"""
from enum import Enum


class TransportErrorKind(str, Enum):
    """What went wrong talking to the mail relay."""

    AUTHENTICATION = "authentication"
    NETWORK = "network"
    RECIPIENT = "recipient"
    UNKNOWN = "unknown"


class RSVPError(Exception):
    """Base class for errors raised while handling an RSVP."""


class RSVPValidationError(RSVPError):
    """The submission is missing required fields or is malformed."""


class InviteBuildError(RSVPError):
    """The calendar invite could not be generated."""


class TransportError(RSVPError):
    """The mail relay rejected or failed to accept a message."""

    def __init__(self, kind: TransportErrorKind, detail: str):
        super().__init__(detail)
        self.kind = kind
        self.detail = detail


class NotificationError(RSVPError):
    """One of the two RSVP emails could not be sent.

    Attributes:
        leg: "admin" or "confirmation".
        cause: The underlying transport error.
    """

    ADMIN = "admin"
    CONFIRMATION = "confirmation"

    def __init__(self, leg: str, cause: TransportError):
        target = "admin notification" if leg == self.ADMIN else "confirmation"
        super().__init__(f"Failed to send {target} email: {cause.detail}")
        self.leg = leg
        self.cause = cause

    @property
    def kind(self) -> TransportErrorKind:
        return self.cause.kind
