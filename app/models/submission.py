"""Submission model for incoming RSVP form posts.

This module defines the Submission model which represents one RSVP as
posted by the public form. Every field is parsed as an optional string so
the RSVP flow, not the request parser, decides which fields are missing
and answers with its own error message.
"""

from pydantic import BaseModel, ConfigDict, Field


class Submission(BaseModel):
    """An RSVP for the soirée as posted by the form.

    Submissions live for a single request: they are validated, turned into
    two emails and a calendar invite, then discarded.

    Attributes:
        name: Attendee's display name. Required.
        email: Attendee's email address. Required, and must look like
            local@domain.tld.
        company: Where the attendee works, if they said.
        role: What the attendee does. Required.
        edge_case_note: Free-text "edge case" the attendee brings along.
            Posted by the form as ``edge``.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    email: str | None = None
    company: str | None = None
    role: str | None = None
    edge_case_note: str | None = Field(default=None, alias="edge")
