"""Outgoing mail message and attachment types."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Attachment:
    """An in-memory file attached to a message.

    Attributes:
        filename: Name shown to the recipient.
        content: Raw bytes of the file.
        mime_type: Full type, e.g. "text/calendar".
        params: Extra Content-Type parameters such as charset or method.
    """
    filename: str
    content: bytes
    mime_type: str
    params: dict[str, str] = field(default_factory=dict)

    @property
    def maintype(self) -> str:
        return self.mime_type.split("/", 1)[0]

    @property
    def subtype(self) -> str:
        return self.mime_type.split("/", 1)[1]


@dataclass(frozen=True)
class MailMessage:
    """A rendered email ready for the mail dispatcher."""
    sender: str
    to: str
    subject: str
    html_body: str
    attachments: tuple[Attachment, ...] = ()
