"""Combine schedule and status into the ordered itinerary."""

from __future__ import annotations

from typing import List, Sequence

from .classifier import classify
from .models import Itinerary, ItineraryStop, PropertyInput, TourMetadata
from .scheduler import schedule


def build_itinerary(tour: TourMetadata, properties: Sequence[PropertyInput]) -> Itinerary:
    """Return one stop per property, in input order, with times and statuses filled in."""
    slots = schedule(tour.start_time, tour.default_showing_duration_minutes, properties)

    stops: List[ItineraryStop] = []
    for number, (prop, slot) in enumerate(zip(properties, slots), start=1):
        status = classify(prop.occupancy, prop.is_confirmed)
        stops.append(
            ItineraryStop(
                stop_number=number,
                address=prop.address,
                mls_id=prop.mls_id,
                start_time=slot.start,
                end_time=slot.end,
                drive_time_from_previous_minutes=slot.drive_time_used,
                occupancy_status=status.occupancy_status,
                appointment_status=status.appointment_status,
                listing_agent_name=prop.listing_agent_name,
                listing_agent_email=prop.listing_agent_email,
            )
        )

    return Itinerary(
        tour_name=tour.tour_name,
        tour_date=tour.tour_date,
        start_time=tour.start_time,
        default_showing_duration_minutes=tour.default_showing_duration_minutes,
        stops=stops,
    )
