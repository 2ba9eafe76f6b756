"""Clock arithmetic for the stops of a tour."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import List, Optional, Sequence

import structlog

from .errors import TourValidationError
from .models import PropertyInput
from .utils import MINUTES_PER_DAY, format_clock, minute_of_day, time_from_minutes

LOGGER = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ScheduledSlot:
    """Start and end of one showing, plus the drive time that led to it."""

    start: time
    end: time
    drive_time_used: Optional[int]


def schedule(
    start_time: time,
    default_duration_minutes: int,
    properties: Sequence[PropertyInput],
) -> List[ScheduledSlot]:
    """
    Compute the showing window of every property, in visiting order.

    The first showing starts at the tour start time. Every later showing starts
    when the previous one ends plus its drive time. Each showing lasts exactly
    ``default_duration_minutes``; nothing is rounded or padded. The drive time
    given for the first property is ignored.
    """
    if default_duration_minutes is None or default_duration_minutes <= 0:
        raise TourValidationError(
            f"default showing duration must be positive, got {default_duration_minutes} minutes"
        )

    slots: List[ScheduledSlot] = []
    cursor = minute_of_day(start_time)

    for position, prop in enumerate(properties, start=1):
        if position == 1:
            drive: Optional[int] = None
            start = cursor
        else:
            drive = prop.drive_time_from_previous_minutes
            if drive is None:
                raise TourValidationError(
                    f"stop {position} ({prop.address}) is missing its drive time from the previous stop"
                )
            if drive < 0:
                raise TourValidationError(
                    f"stop {position} ({prop.address}) has a negative drive time of {drive} minutes"
                )
            start = cursor + drive

        end = start + default_duration_minutes
        if end >= MINUTES_PER_DAY:
            raise TourValidationError(
                f"stop {position} ({prop.address}) would end after midnight; "
                "tours must finish on the tour date"
            )

        slots.append(ScheduledSlot(start=time_from_minutes(start), end=time_from_minutes(end), drive_time_used=drive))
        cursor = end

    LOGGER.debug(
        "schedule.computed",
        stops=len(slots),
        first_start=format_clock(slots[0].start) if slots else None,
        last_end=format_clock(slots[-1].end) if slots else None,
    )
    return slots
