"""Build the calendar invite attached to RSVP confirmations."""
import re
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, timezone

from icalendar import Calendar, Event, vCalAddress, vText

from app.core.errors import InviteBuildError

PRODID = "-//Edge Cases//Edge Cases Soiree//EN"
UID_SLUG = "edge-cases-soiree"
UID_DOMAIN = "promontoryai.com"

# The soirée is pinned to Pacific daylight time
PDT = timezone(timedelta(hours=-7), "PDT")


@dataclass(frozen=True)
class EventWindow:
    """Start and end instants of an event, both timezone-aware."""
    start: datetime
    end: datetime


@dataclass(frozen=True)
class EventDetails:
    """Everything about the event that does not depend on the attendee."""
    summary: str
    description: str
    location: str
    organizer_name: str
    organizer_email: str
    date_label: str
    time_label: str


SOIREE_WINDOW = EventWindow(
    start=datetime(2025, 6, 25, 18, 0, tzinfo=PDT),
    end=datetime(2025, 6, 25, 21, 0, tzinfo=PDT),
)

SOIREE = EventDetails(
    summary="Edge Cases Soirée",
    description=(
        "A soirée for those working seriously and semi-seriously on artificial "
        "intelligence. Come ready for off-record conversations about failures, "
        "foresight, and unfinished thoughts over drinks."
    ),
    location="[VENUE TBD]",
    organizer_name="Promontory AI",
    organizer_email="edgecases@promontoryai.com",
    date_label="Wednesday, June 25th, 2025",
    time_label="6:00 PM - 9:00 PM PDT",
)


def make_uid(generated_at: datetime) -> str:
    """Event UID seeded with the generation time in epoch milliseconds."""
    return f"{UID_SLUG}-{int(generated_at.timestamp() * 1000)}@{UID_DOMAIN}"


def _param_safe(value: str) -> str:
    """Make a value usable as a property parameter (e.g. CN).

    Parameter values cannot span lines or contain double quotes; the
    icalendar library quotes values holding , ; or : on output.
    """
    value = re.sub(r"[\r\n]+", " ", value)
    return value.replace('"', "").strip()


def build_invite(
    attendee_name: str,
    attendee_email: str,
    window: EventWindow = SOIREE_WINDOW,
    generated_at: datetime | None = None,
    details: EventDetails = SOIREE,
) -> str:
    """
    Render a single-event iCalendar invite (METHOD:REQUEST).

    All timestamps are written as UTC (``YYYYMMDDTHHMMSSZ``) so no VTIMEZONE
    block is needed. The attendee is marked RSVP=TRUE with a tentative
    participation status.

    Raises:
        InviteBuildError: if the attendee is incomplete or the window is empty.
    """
    if not attendee_name or not attendee_email:
        raise InviteBuildError("Attendee name and email are required")
    if window.start >= window.end:
        raise InviteBuildError(
            f"Event must start before it ends: {window.start} >= {window.end}"
        )

    generated_at = generated_at or datetime.now(UTC)

    cal = Calendar()
    cal.add("version", "2.0")
    cal.add("prodid", PRODID)
    cal.add("calscale", "GREGORIAN")
    cal.add("method", "REQUEST")

    event = Event()
    event.add("uid", make_uid(generated_at))
    event.add("dtstart", window.start.astimezone(UTC))
    event.add("dtend", window.end.astimezone(UTC))
    event.add("dtstamp", generated_at.astimezone(UTC))
    event.add("summary", details.summary)
    event.add("description", details.description)
    event.add("location", details.location)

    organizer = vCalAddress(f"mailto:{details.organizer_email}")
    organizer.params["cn"] = vText(details.organizer_name)
    event.add("organizer", organizer)

    attendee = vCalAddress(f"mailto:{attendee_email}")
    attendee.params["cn"] = vText(_param_safe(attendee_name))
    attendee.params["rsvp"] = vText("TRUE")
    attendee.params["partstat"] = vText("TENTATIVE")
    event.add("attendee", attendee, encode=0)

    event.add("status", "CONFIRMED")
    event.add("transp", "OPAQUE")

    cal.add_component(event)
    return cal.to_ical().decode("utf-8")
