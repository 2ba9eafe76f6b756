"""Pydantic models for the tour request document and the generated response."""

from __future__ import annotations

from datetime import date, time
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from .utils import blank_to_none, format_clock, normalise_whitespace, parse_clock_time


class Occupancy(str, Enum):
    """Occupancy reported for a listing."""

    VACANT = "Vacant"
    OCCUPIED = "Occupied"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: object) -> "Occupancy":
        """Match a raw occupancy value, ignoring case and surrounding whitespace."""
        if isinstance(value, cls):
            return value
        text = normalise_whitespace(str(value)).lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        allowed = ", ".join(member.value for member in cls)
        raise ValueError(f"occupancy '{value}' is not one of {allowed}")


class OccupancyStatus(str, Enum):
    VACANT = "Vacant – OK to Show"
    APPOINTMENT_NEEDED = "Occupied – Appointment Needed"


class AppointmentStatus(str, Enum):
    OK_TO_SHOW = "OK to Show (Vacant)"
    PENDING = "Tentative – Appointment Pending"
    CONFIRMED = "Confirmed"

    @property
    def short_note(self) -> str:
        """One-word note used in the client summary."""
        return {
            AppointmentStatus.OK_TO_SHOW: "Vacant",
            AppointmentStatus.PENDING: "Pending",
            AppointmentStatus.CONFIRMED: "Confirmed",
        }[self]


class CamelModel(BaseModel):
    """Base model exposing camelCase names on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


def _required_text(value: object, label: str) -> str:
    cleaned = normalise_whitespace(str(value)) if value is not None else ""
    if not cleaned:
        raise ValueError(f"{label} is required")
    return cleaned


# ---------------------------------------------------------------------------
# Input document
# ---------------------------------------------------------------------------


class AgentInfo(CamelModel):
    """The buyer's agent running the tour."""

    name: str
    email: str
    phone: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _name_present(cls, value: object) -> str:
        return _required_text(value, "agent name")

    @field_validator("email", mode="before")
    @classmethod
    def _email_present(cls, value: object) -> str:
        return _required_text(value, "agent email")

    @field_validator("phone", mode="before")
    @classmethod
    def _blank_phone(cls, value: object) -> object:
        return blank_to_none(value)


class TourMetadata(CamelModel):
    """Date, start time and defaults for the whole tour."""

    tour_name: Optional[str] = None
    tour_date: date
    start_time: time
    default_showing_duration_minutes: int = Field(
        validation_alias=AliasChoices(
            "defaultShowingDurationMinutes",
            "defaultDuration",
            "default_showing_duration_minutes",
        ),
    )
    buyer_email: Optional[str] = None
    is_update_run: bool = False

    @field_validator("tour_name", "buyer_email", mode="before")
    @classmethod
    def _blank_optional(cls, value: object) -> object:
        return blank_to_none(value)

    @field_validator("start_time", mode="before")
    @classmethod
    def _parse_start_time(cls, value: object) -> time:
        return parse_clock_time(value)

    @field_validator("default_showing_duration_minutes")
    @classmethod
    def _positive_duration(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"default showing duration must be positive, got {value} minutes")
        return value

    @field_validator("is_update_run", mode="before")
    @classmethod
    def _null_is_false(cls, value: object) -> object:
        return False if value is None else value

    @field_serializer("start_time")
    def _clock(self, value: time) -> str:
        return format_clock(value)


_DRIVE_TIME_KEYS = (
    "driveTimeFromPreviousMinutes",
    "driveTimeFromPrevious",
    "drive_time_from_previous_minutes",
)


class PropertyInput(CamelModel):
    """One property to visit; position in the list is the visiting order."""

    id: Optional[str] = None
    address: str
    mls_id: Optional[str] = None
    drive_time_from_previous_minutes: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices(*_DRIVE_TIME_KEYS),
    )
    occupancy: Occupancy = Occupancy.UNKNOWN
    listing_agent_name: Optional[str] = None
    listing_agent_email: Optional[str] = None
    is_confirmed: bool = False
    was_confirmed: Optional[bool] = None
    order: Optional[int] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: object) -> object:
        value = blank_to_none(value)
        return str(value) if value is not None else None

    @field_validator("address", mode="before")
    @classmethod
    def _address_present(cls, value: object) -> str:
        return _required_text(value, "address")

    @field_validator("mls_id", "listing_agent_name", "listing_agent_email", mode="before")
    @classmethod
    def _blank_optional(cls, value: object) -> object:
        value = blank_to_none(value)
        return str(value) if value is not None else None

    @field_validator("occupancy", mode="before")
    @classmethod
    def _parse_occupancy(cls, value: object) -> Occupancy:
        # Missing occupancy is never relaxed to vacant.
        if value is None:
            return Occupancy.UNKNOWN
        return Occupancy.parse(value)

    @field_validator("is_confirmed", mode="before")
    @classmethod
    def _null_is_false(cls, value: object) -> object:
        return False if value is None else value


class RunContext(CamelModel):
    """Top-level ``context`` block sent by older clients."""

    is_update_run: bool = False


class ResaRequest(CamelModel):
    """The full input document for one generation run."""

    agent: AgentInfo
    tour: TourMetadata
    properties: List[PropertyInput]
    context: Optional[RunContext] = None

    @field_validator("properties", mode="before")
    @classmethod
    def _fill_positions(cls, value: object) -> object:
        # The first stop has no previous stop, so its drive time is never read.
        if not isinstance(value, list):
            return value
        filled = []
        for position, item in enumerate(value, start=1):
            if isinstance(item, dict):
                item = dict(item)
                if blank_to_none(item.get("id")) is None:
                    item["id"] = str(position)
                if position == 1:
                    for key in _DRIVE_TIME_KEYS:
                        item.pop(key, None)
            elif isinstance(item, PropertyInput):
                updates: Dict[str, Any] = {}
                if item.id is None:
                    updates["id"] = str(position)
                if position == 1:
                    updates["drive_time_from_previous_minutes"] = None
                item = item.model_copy(update=updates)
            filled.append(item)
        return filled

    @field_validator("properties")
    @classmethod
    def _ordered_properties(cls, value: List[PropertyInput]) -> List[PropertyInput]:
        if not value:
            raise ValueError("a tour needs at least one property")
        for position, prop in enumerate(value, start=1):
            if prop.order is not None and prop.order != position:
                raise ValueError(
                    f"property '{prop.address}' has order {prop.order} but is listed at position {position}"
                )
        return value

    @property
    def is_update_run(self) -> bool:
        return self.tour.is_update_run or bool(self.context and self.context.is_update_run)


# ---------------------------------------------------------------------------
# Generated response
# ---------------------------------------------------------------------------


def build_mailto(to: Optional[str], subject: Optional[str], body: Optional[str], cc: Optional[str] = None) -> str:
    """Return a ``mailto:`` link that opens the draft in a mail client."""
    link = f"mailto:{to or ''}?subject={quote(subject or '')}&body={quote(body or '')}"
    if cc:
        link += f"&cc={quote(cc)}"
    return link


class ItineraryStop(CamelModel):
    stop_number: int
    address: str
    mls_id: Optional[str] = None
    start_time: time
    end_time: time
    drive_time_from_previous_minutes: Optional[int] = None
    occupancy_status: OccupancyStatus
    appointment_status: AppointmentStatus
    listing_agent_name: Optional[str] = None
    listing_agent_email: Optional[str] = None

    @field_serializer("start_time", "end_time")
    def _clock(self, value: time) -> str:
        return format_clock(value)


class Itinerary(CamelModel):
    tour_name: Optional[str] = None
    tour_date: date
    start_time: time
    default_showing_duration_minutes: int
    stops: List[ItineraryStop] = Field(default_factory=list)

    @field_serializer("start_time")
    def _clock(self, value: time) -> str:
        return format_clock(value)

    def stops_with_status(self, status: AppointmentStatus) -> List[ItineraryStop]:
        return [stop for stop in self.stops if stop.appointment_status == status]


class AppointmentRequestEmail(CamelModel):
    """Draft asking a listing agent to confirm a showing."""

    property_address: str
    to: str
    cc: Optional[str] = None
    subject: str
    body: str

    def mailto_url(self) -> str:
        return build_mailto(self.to, self.subject, self.body, self.cc)


class UpdatedItineraryEmail(CamelModel):
    """Notification sent after confirmations change; empty unless ``send``."""

    send: bool = False
    to: Optional[str] = None
    cc: Optional[str] = None
    subject: Optional[str] = None
    body: Optional[str] = None

    @classmethod
    def not_sent(cls) -> "UpdatedItineraryEmail":
        return cls(send=False)

    def mailto_url(self) -> Optional[str]:
        if not self.send:
            return None
        return build_mailto(self.to, self.subject, self.body, self.cc)


class TourSummaryEmail(CamelModel):
    """Client-facing summary of the tour, always produced."""

    to: Optional[str] = None
    subject: str
    body: str

    def mailto_url(self, cc: Optional[str] = None) -> str:
        return build_mailto(self.to, self.subject, self.body, cc)


class ResaResponse(CamelModel):
    """Everything one generation run hands back to the caller."""

    itinerary: Itinerary
    appointment_request_emails: List[AppointmentRequestEmail] = Field(default_factory=list)
    updated_itinerary_email: UpdatedItineraryEmail
    tour_summary_email: TourSummaryEmail

    def to_document(self) -> Dict[str, Any]:
        """JSON-ready dict using the camelCase wire names."""
        return self.model_dump(mode="json", by_alias=True)
