"""Occupancy and appointment status rules."""

from __future__ import annotations

from typing import NamedTuple, Optional

from .errors import TourValidationError
from .models import AppointmentStatus, Occupancy, OccupancyStatus


class StopStatus(NamedTuple):
    occupancy_status: OccupancyStatus
    appointment_status: AppointmentStatus


def classify(occupancy: Occupancy | str, is_confirmed: Optional[bool] = False) -> StopStatus:
    """Map a property's occupancy and confirmation flag to its two status labels.

    Vacant homes can always be shown. Occupied homes, and homes whose occupancy
    is unknown, need an appointment, which is either confirmed or still pending.
    """
    try:
        occupancy = Occupancy.parse(occupancy)
    except ValueError as exc:
        raise TourValidationError(str(exc)) from exc

    if occupancy is Occupancy.VACANT:
        return StopStatus(OccupancyStatus.VACANT, AppointmentStatus.OK_TO_SHOW)

    if is_confirmed:
        return StopStatus(OccupancyStatus.APPOINTMENT_NEEDED, AppointmentStatus.CONFIRMED)
    return StopStatus(OccupancyStatus.APPOINTMENT_NEEDED, AppointmentStatus.PENDING)
