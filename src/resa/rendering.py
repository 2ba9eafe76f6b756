"""Plain-text rendering of a generated tour for terminals and clipboards."""

from __future__ import annotations

from typing import List, Optional

from .models import AppointmentStatus, Itinerary, ItineraryStop, ResaResponse
from .utils import format_clock


def format_itinerary(itinerary: Itinerary, *, fallback_name: str = "Showing Tour", clock_format: str = "24h") -> str:
    """Build the stop-by-stop timeline."""
    lines: List[str] = [
        itinerary.tour_name or fallback_name,
        f"{itinerary.tour_date.isoformat()} • Starts at {format_clock(itinerary.start_time, clock_format)}",
        "",
    ]
    for stop in itinerary.stops:
        lines.extend(format_stop(stop, clock_format=clock_format))
    return "\n".join(lines).strip()


def format_stop(stop: ItineraryStop, *, clock_format: str = "24h") -> List[str]:
    """Format a single stop as a small block of lines."""
    ready = stop.appointment_status != AppointmentStatus.PENDING
    mark = "✓" if ready else "!"
    mls = f" (MLS {stop.mls_id})" if stop.mls_id else ""
    window = f"{format_clock(stop.start_time, clock_format)} - {format_clock(stop.end_time, clock_format)}"

    lines = [f"{stop.stop_number}. [{mark}] {window}  {stop.address}{mls}"]
    if stop.drive_time_from_previous_minutes:
        lines.append(f"   +{stop.drive_time_from_previous_minutes}m drive")
    lines.append(f"   {stop.occupancy_status.value} / {stop.appointment_status.value}")
    if stop.listing_agent_name:
        contact = f" <{stop.listing_agent_email}>" if stop.listing_agent_email else ""
        lines.append(f"   Listing agent: {stop.listing_agent_name}{contact}")
    lines.append("")
    return lines


def format_draft(to: Optional[str], subject: Optional[str], body: Optional[str], cc: Optional[str] = None) -> str:
    """Header-and-body text of a draft, ready to paste into a mail client."""
    return f"To: {to or ''}\nCc: {cc or ''}\nSubject: {subject or ''}\n\n{body or ''}"


def format_response(response: ResaResponse, *, fallback_name: str = "Showing Tour", clock_format: str = "24h") -> str:
    """The itinerary followed by every draft in the response."""
    sections: List[str] = [
        format_itinerary(response.itinerary, fallback_name=fallback_name, clock_format=clock_format)
    ]

    for email in response.appointment_request_emails:
        sections.append(f"=== Appointment request: {email.property_address} ===")
        sections.append(format_draft(email.to, email.subject, email.body, email.cc))

    update = response.updated_itinerary_email
    if update.send:
        sections.append("=== Update notification ===")
        sections.append(format_draft(update.to, update.subject, update.body, update.cc))

    summary = response.tour_summary_email
    sections.append("=== Client tour summary ===")
    sections.append(format_draft(summary.to, summary.subject, summary.body))

    return "\n\n".join(sections)
