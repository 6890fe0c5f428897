from app.models.message import Attachment, MailMessage
from app.models.submission import Submission

__all__ = ["Submission", "MailMessage", "Attachment"]
