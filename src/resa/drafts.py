"""Email drafts built from a finished itinerary.

Three kinds of draft are produced:

* an appointment request to the listing agent of every occupied home whose
  showing is not yet confirmed,
* an "updated itinerary" notice, only when the run is flagged as an update,
* a client tour summary, always.

All wording comes from fixed templates so the same input always yields the
same drafts.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import structlog

from .config import Settings
from .errors import TourValidationError
from .models import (
    AgentInfo,
    AppointmentRequestEmail,
    AppointmentStatus,
    Itinerary,
    ItineraryStop,
    PropertyInput,
    TourSummaryEmail,
    UpdatedItineraryEmail,
)
from .utils import first_non_empty, format_clock, verbose_date

LOGGER = structlog.get_logger(__name__)


def draft_appointment_requests(
    itinerary: Itinerary,
    agent: AgentInfo,
    settings: Optional[Settings] = None,
) -> List[AppointmentRequestEmail]:
    """Return one showing request per pending stop, in stop order."""
    settings = settings or Settings()
    pending = itinerary.stops_with_status(AppointmentStatus.PENDING)

    missing = [
        f"stop {stop.stop_number} ({stop.address}) needs an appointment but has no listing agent email"
        for stop in pending
        if not stop.listing_agent_email
    ]
    if missing:
        raise TourValidationError(missing)

    drafts = [_appointment_request(itinerary, stop, agent, settings) for stop in pending]
    for draft in drafts:
        LOGGER.info("drafts.appointment.created", address=draft.property_address, to=draft.to)
    return drafts


def draft_updated_itinerary(
    itinerary: Itinerary,
    properties: Sequence[PropertyInput],
    agent: AgentInfo,
    *,
    buyer_email: Optional[str],
    is_update_run: bool,
    settings: Optional[Settings] = None,
) -> UpdatedItineraryEmail:
    """Return the update notice, or an unsent placeholder when this is not an update run."""
    if not is_update_run:
        return UpdatedItineraryEmail.not_sent()

    settings = settings or Settings()
    recipient = first_non_empty([buyer_email, agent.email])
    # The agent is copied only when the notice goes to the buyer.
    cc = agent.email if recipient != agent.email else None
    tour_name = _tour_name(itinerary, settings)
    newly_confirmed = _newly_confirmed(itinerary, properties) if settings.flag_new_confirmations else set()

    lines: List[str] = [
        "Hello,",
        "",
        (
            f"Here is the updated itinerary for {tour_name} on {verbose_date(itinerary.tour_date)}, "
            f"starting at approximately {format_clock(itinerary.start_time, settings.clock_format)}."
        ),
    ]
    if newly_confirmed:
        noun = "showing has" if len(newly_confirmed) == 1 else "showings have"
        lines.append(f"{len(newly_confirmed)} {noun} been confirmed since the last update (marked with *).")
    lines.append("")

    for stop in itinerary.stops:
        marker = " *" if stop.stop_number in newly_confirmed else ""
        lines.append(f"{stop.stop_number}. {stop.address}{marker}")
        lines.append(f"   Time: {_time_range(stop, settings)}")
        lines.append(f"   Drive: {_drive_description(stop)}")
        lines.append(f"   Status: {stop.appointment_status.value}")
        lines.append("")

    pending = itinerary.stops_with_status(AppointmentStatus.PENDING)
    if pending:
        lines.append(
            f"{_count(len(pending), 'showing is', 'showings are')} still awaiting confirmation. "
            "I'll follow up as soon as I hear back."
        )
    else:
        lines.append("All showings that need an appointment are now confirmed.")
    lines.append("")
    lines.extend(_signature(agent))

    LOGGER.info("drafts.update.created", to=recipient, stops=len(itinerary.stops), newly_confirmed=len(newly_confirmed))
    return UpdatedItineraryEmail(
        send=True,
        to=recipient,
        cc=cc,
        subject=f"Updated Tour Itinerary: {itinerary.tour_date.isoformat()} - {tour_name}",
        body="\n".join(lines),
    )


def draft_tour_summary(
    itinerary: Itinerary,
    agent: AgentInfo,
    *,
    buyer_email: Optional[str],
    settings: Optional[Settings] = None,
) -> TourSummaryEmail:
    """Return the client-facing summary; produced even without a buyer address."""
    settings = settings or Settings()
    tour_name = _tour_name(itinerary, settings)

    lines: List[str] = [
        "Hi there,",
        "",
        (
            f"I'm looking forward to our home tour on {verbose_date(itinerary.tour_date)}! "
            "Here is the plan for the day:"
        ),
        "",
    ]
    for stop in itinerary.stops:
        start = format_clock(stop.start_time, settings.clock_format)
        lines.append(f"{stop.stop_number}. {start} - {stop.address} ({stop.appointment_status.short_note})")
    lines.append("")

    lines.append("Times are approximate and may shift a little with traffic.")
    pending = itinerary.stops_with_status(AppointmentStatus.PENDING)
    if pending:
        lines.append(
            f"{_count(len(pending), 'home is', 'homes are')} still pending confirmation from the listing agent, "
            "and I'll let you know as soon as I hear back."
        )
    lines.append("")
    lines.append("Please reach out if you have any questions before the tour.")
    lines.append("")
    lines.extend(_signature(agent, closing="Best regards,"))

    LOGGER.info("drafts.summary.created", to=buyer_email, stops=len(itinerary.stops))
    return TourSummaryEmail(
        to=buyer_email,
        subject=f"Tour Itinerary: {itinerary.tour_date.isoformat()} - {tour_name}",
        body="\n".join(lines),
    )


def _appointment_request(
    itinerary: Itinerary,
    stop: ItineraryStop,
    agent: AgentInfo,
    settings: Settings,
) -> AppointmentRequestEmail:
    approx_start = format_clock(stop.start_time, settings.clock_format)
    greeting = f"Hi {stop.listing_agent_name}," if stop.listing_agent_name else "Hello,"
    mls = f" (MLS #{stop.mls_id})" if stop.mls_id else ""

    lines = [
        greeting,
        "",
        (
            f"I'd like to request a showing of {stop.address}{mls} for my buyers on "
            f"{verbose_date(itinerary.tour_date)} at approximately {approx_start}."
        ),
        "",
        (
            f"This showing is stop {stop.stop_number} of {len(itinerary.stops)} on a multi-stop tour, "
            f"so we plan to be there from about {_time_range(stop, settings)}. "
            "The exact arrival time may shift slightly due to traffic."
        ),
        "",
        "Could you please confirm this time, or suggest an alternative if it doesn't work for the sellers?",
        "",
        *_signature(agent, closing="Thank you,"),
    ]

    return AppointmentRequestEmail(
        property_address=stop.address,
        to=stop.listing_agent_email,
        cc=agent.email,
        subject=f"Showing Request: {stop.address} on {itinerary.tour_date.isoformat()} at {approx_start}",
        body="\n".join(lines),
    )


def _newly_confirmed(itinerary: Itinerary, properties: Sequence[PropertyInput]) -> set[int]:
    """Stop numbers that were unconfirmed before this run and are confirmed now."""
    flagged = set()
    for stop, prop in zip(itinerary.stops, properties):
        if stop.appointment_status == AppointmentStatus.CONFIRMED and prop.was_confirmed is False:
            flagged.add(stop.stop_number)
    return flagged


def _tour_name(itinerary: Itinerary, settings: Settings) -> str:
    return itinerary.tour_name or settings.fallback_tour_name


def _time_range(stop: ItineraryStop, settings: Settings) -> str:
    return f"{format_clock(stop.start_time, settings.clock_format)} to {format_clock(stop.end_time, settings.clock_format)}"


def _drive_description(stop: ItineraryStop) -> str:
    if stop.drive_time_from_previous_minutes is None:
        return "first stop"
    return f"{stop.drive_time_from_previous_minutes} min from previous stop"


def _count(amount: int, singular: str, plural: str) -> str:
    return f"{amount} {singular if amount == 1 else plural}"


def _signature(agent: AgentInfo, closing: str = "Thanks,") -> List[str]:
    lines = [closing, agent.name, agent.email]
    if agent.phone:
        lines.append(agent.phone)
    return lines
