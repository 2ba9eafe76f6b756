"""The ``generate`` operation: input document in, response document out."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Union

import structlog
from pydantic import ValidationError

from .config import Settings
from .drafts import draft_appointment_requests, draft_tour_summary, draft_updated_itinerary
from .errors import ItineraryConsistencyError, TourValidationError
from .itinerary import build_itinerary
from .models import (
    AppointmentRequestEmail,
    AppointmentStatus,
    Itinerary,
    ResaRequest,
    ResaResponse,
    TourSummaryEmail,
    UpdatedItineraryEmail,
)

LOGGER = structlog.get_logger(__name__)


def parse_request(document: Union[ResaRequest, Mapping[str, Any]]) -> ResaRequest:
    """Validate a raw input document, converting pydantic errors to readable reasons."""
    if isinstance(document, ResaRequest):
        return document
    try:
        return ResaRequest.model_validate(document)
    except ValidationError as exc:
        raise TourValidationError(_describe_errors(exc)) from exc


def generate(
    document: Union[ResaRequest, Mapping[str, Any]],
    *,
    settings: Optional[Settings] = None,
    force_update_run: bool = False,
) -> ResaResponse:
    """Build the itinerary and every email draft for one tour.

    Raises ``TourValidationError`` for bad input and ``ItineraryConsistencyError``
    if the assembled response fails its cross-checks. Nothing partial is returned.
    """
    settings = settings or Settings()
    try:
        request = parse_request(document)
    except TourValidationError as exc:
        LOGGER.warning("itinerary.generate.rejected", reasons=exc.reasons)
        raise

    is_update_run = force_update_run or request.is_update_run
    LOGGER.info(
        "itinerary.generate.start",
        tour_name=request.tour.tour_name,
        tour_date=request.tour.tour_date.isoformat(),
        properties=len(request.properties),
        update_run=is_update_run,
    )

    try:
        itinerary = build_itinerary(request.tour, request.properties)
        appointment_emails = draft_appointment_requests(itinerary, request.agent, settings)
        updated_email = draft_updated_itinerary(
            itinerary,
            request.properties,
            request.agent,
            buyer_email=request.tour.buyer_email,
            is_update_run=is_update_run,
            settings=settings,
        )
        summary_email = draft_tour_summary(
            itinerary,
            request.agent,
            buyer_email=request.tour.buyer_email,
            settings=settings,
        )
    except TourValidationError as exc:
        LOGGER.warning("itinerary.generate.rejected", reasons=exc.reasons)
        raise

    response = assemble(
        itinerary,
        appointment_emails,
        updated_email,
        summary_email,
        expected_stops=len(request.properties),
        is_update_run=is_update_run,
    )
    LOGGER.info(
        "itinerary.generate.complete",
        stops=len(itinerary.stops),
        appointment_requests=len(appointment_emails),
        update_sent=updated_email.send,
    )
    return response


def assemble(
    itinerary: Itinerary,
    appointment_emails: List[AppointmentRequestEmail],
    updated_email: UpdatedItineraryEmail,
    summary_email: TourSummaryEmail,
    *,
    expected_stops: int,
    is_update_run: bool,
) -> ResaResponse:
    """Package the parts into a response after checking they agree with each other."""
    problems: List[str] = []

    if len(itinerary.stops) != expected_stops:
        problems.append(f"itinerary has {len(itinerary.stops)} stops for {expected_stops} properties")

    numbers = [stop.stop_number for stop in itinerary.stops]
    if numbers != list(range(1, len(numbers) + 1)):
        problems.append(f"stop numbers {numbers} are not consecutive from 1")

    pending = itinerary.stops_with_status(AppointmentStatus.PENDING)
    if len(appointment_emails) != len(pending):
        problems.append(
            f"{len(appointment_emails)} appointment requests drafted for {len(pending)} pending stops"
        )
    elif [email.property_address for email in appointment_emails] != [stop.address for stop in pending]:
        problems.append("appointment requests are not in stop order")

    if updated_email.send != is_update_run:
        problems.append(f"updated itinerary send={updated_email.send} but update run={is_update_run}")
    if not updated_email.send and any(
        value is not None for value in (updated_email.to, updated_email.cc, updated_email.subject, updated_email.body)
    ):
        problems.append("unsent updated itinerary email carries content")

    if not summary_email.subject or not summary_email.body:
        problems.append("tour summary email is missing its subject or body")

    if problems:
        LOGGER.error("itinerary.generate.inconsistent", problems=problems)
        raise ItineraryConsistencyError("; ".join(problems))

    return ResaResponse(
        itinerary=itinerary,
        appointment_request_emails=appointment_emails,
        updated_itinerary_email=updated_email,
        tour_summary_email=summary_email,
    )


def _describe_errors(exc: ValidationError) -> List[str]:
    reasons = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = str(error.get("msg", "invalid value")).removeprefix("Value error, ")
        reasons.append(f"{location}: {message}" if location else message)
    return reasons
