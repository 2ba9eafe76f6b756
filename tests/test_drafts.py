import pytest

from resa.assembler import parse_request
from resa.config import Settings
from resa.drafts import draft_appointment_requests, draft_tour_summary, draft_updated_itinerary
from resa.errors import TourValidationError
from resa.itinerary import build_itinerary


def _build(document):
    request = parse_request(document)
    return request, build_itinerary(request.tour, request.properties)


class TestAppointmentRequests:
    """One request per occupied, unconfirmed stop."""

    def test_only_pending_stops_get_requests(self, document, settings) -> None:
        request, itinerary = _build(document)
        emails = draft_appointment_requests(itinerary, request.agent, settings)
        assert [email.property_address for email in emails] == ["456 Oak Dr, Austin, TX 78702"]

    def test_fields(self, document, settings) -> None:
        request, itinerary = _build(document)
        email = draft_appointment_requests(itinerary, request.agent, settings)[0]
        assert email.to == "sara@example.com"
        assert email.cc == "chak@example.com"
        assert email.subject == "Showing Request: 456 Oak Dr, Austin, TX 78702 on 2025-12-20 at 10:27 AM"

    def test_body_content(self, document, settings) -> None:
        request, itinerary = _build(document)
        body = draft_appointment_requests(itinerary, request.agent, settings)[0].body
        assert body.startswith("Hi Sara Agent,")
        assert "Saturday, December 20, 2025 at approximately 10:27 AM" in body
        assert "MLS #7654321" in body
        assert "multi-stop tour" in body
        assert "traffic" in body
        assert "alternative" in body
        assert body.rstrip().endswith("512-555-1212")

    def test_twenty_four_hour_clock(self, document) -> None:
        request, itinerary = _build(document)
        email = draft_appointment_requests(itinerary, request.agent, Settings(clock_format="24h"))[0]
        assert email.subject.endswith(" at 10:27")

    def test_stop_order_preserved(self, document, settings) -> None:
        for prop in document["properties"]:
            prop["occupancy"] = "Occupied"
            prop["isConfirmed"] = False
        request, itinerary = _build(document)
        emails = draft_appointment_requests(itinerary, request.agent, settings)
        assert [email.to for email in emails] == ["john@example.com", "sara@example.com", "mike@example.com"]

    def test_no_pending_stops(self, document, settings) -> None:
        document["properties"][1]["isConfirmed"] = True
        request, itinerary = _build(document)
        assert draft_appointment_requests(itinerary, request.agent, settings) == []

    def test_missing_listing_email_rejected(self, document, settings) -> None:
        del document["properties"][1]["listingAgentEmail"]
        request, itinerary = _build(document)
        with pytest.raises(TourValidationError, match="no listing agent email"):
            draft_appointment_requests(itinerary, request.agent, settings)

    def test_missing_listing_email_fine_when_confirmed(self, document, settings) -> None:
        del document["properties"][2]["listingAgentEmail"]
        request, itinerary = _build(document)
        assert len(draft_appointment_requests(itinerary, request.agent, settings)) == 1

    def test_anonymous_listing_agent_greeting(self, document, settings) -> None:
        del document["properties"][1]["listingAgentName"]
        request, itinerary = _build(document)
        assert draft_appointment_requests(itinerary, request.agent, settings)[0].body.startswith("Hello,")


class TestUpdatedItinerary:
    """Update notice gated on the update flag."""

    def test_not_sent_outside_update_runs(self, document, settings) -> None:
        request, itinerary = _build(document)
        email = draft_updated_itinerary(
            itinerary, request.properties, request.agent,
            buyer_email=request.tour.buyer_email, is_update_run=False, settings=settings,
        )
        assert email.send is False
        assert (email.to, email.cc, email.subject, email.body) == (None, None, None, None)
        assert email.mailto_url() is None

    def test_sent_to_buyer_with_agent_copied(self, document, settings) -> None:
        request, itinerary = _build(document)
        email = draft_updated_itinerary(
            itinerary, request.properties, request.agent,
            buyer_email=request.tour.buyer_email, is_update_run=True, settings=settings,
        )
        assert email.send is True
        assert email.to == "buyer@example.com"
        assert email.cc == "chak@example.com"
        assert email.subject == "Updated Tour Itinerary: 2025-12-20 - Smith Buyers Tour"

    def test_falls_back_to_agent(self, document, settings) -> None:
        request, itinerary = _build(document)
        email = draft_updated_itinerary(
            itinerary, request.properties, request.agent,
            buyer_email=None, is_update_run=True, settings=settings,
        )
        assert email.to == "chak@example.com"
        assert email.cc is None

    def test_body_lists_every_stop(self, document, settings) -> None:
        request, itinerary = _build(document)
        body = draft_updated_itinerary(
            itinerary, request.properties, request.agent,
            buyer_email=None, is_update_run=True, settings=settings,
        ).body
        for stop in itinerary.stops:
            assert f"{stop.stop_number}. {stop.address}" in body
        assert "10:27 AM to 10:42 AM" in body
        assert "Drive: first stop" in body
        assert "Drive: 12 min from previous stop" in body
        assert "Status: Tentative – Appointment Pending" in body
        assert "1 showing is still awaiting confirmation" in body
        assert body.index("1. 123 Main St") < body.index("2. 456 Oak Dr") < body.index("3. 789 Pine Ln")

    def test_newly_confirmed_flagged(self, document, settings) -> None:
        document["properties"][2]["wasConfirmed"] = False
        request, itinerary = _build(document)
        body = draft_updated_itinerary(
            itinerary, request.properties, request.agent,
            buyer_email=None, is_update_run=True, settings=settings,
        ).body
        assert "3. 789 Pine Ln, Austin, TX 78703 *" in body
        assert "1 showing has been confirmed since the last update" in body
        assert "2. 456 Oak Dr, Austin, TX 78702 *" not in body

    def test_flagging_can_be_disabled(self, document) -> None:
        document["properties"][2]["wasConfirmed"] = False
        request, itinerary = _build(document)
        body = draft_updated_itinerary(
            itinerary, request.properties, request.agent,
            buyer_email=None, is_update_run=True, settings=Settings(flag_new_confirmations=False),
        ).body
        assert " *" not in body


class TestTourSummary:
    """The client summary is always drafted."""

    def test_subject_and_recipient(self, document, settings) -> None:
        request, itinerary = _build(document)
        email = draft_tour_summary(itinerary, request.agent, buyer_email="buyer@example.com", settings=settings)
        assert email.to == "buyer@example.com"
        assert email.subject == "Tour Itinerary: 2025-12-20 - Smith Buyers Tour"

    def test_stop_notes(self, document, settings) -> None:
        request, itinerary = _build(document)
        body = draft_tour_summary(itinerary, request.agent, buyer_email=None, settings=settings).body
        assert "1. 10:00 AM - 123 Main St, Austin, TX 78701 (Vacant)" in body
        assert "2. 10:27 AM - 456 Oak Dr, Austin, TX 78702 (Pending)" in body
        assert "3. 10:50 AM - 789 Pine Ln, Austin, TX 78703 (Confirmed)" in body
        assert body.startswith("Hi there,")
        assert "Best regards," in body

    def test_drafted_without_buyer_or_tour_name(self, document, settings) -> None:
        document["tour"].pop("tourName")
        document["tour"].pop("buyerEmail")
        request, itinerary = _build(document)
        email = draft_tour_summary(itinerary, request.agent, buyer_email=None, settings=settings)
        assert email.to is None
        assert email.subject == "Tour Itinerary: 2025-12-20 - Showing Tour"
        assert email.body

    def test_all_vacant_has_no_pending_note(self, document, settings) -> None:
        for prop in document["properties"]:
            prop["occupancy"] = "Vacant"
        request, itinerary = _build(document)
        body = draft_tour_summary(itinerary, request.agent, buyer_email=None, settings=settings).body
        assert "pending confirmation" not in body

    def test_mailto_copies_agent(self, document, settings) -> None:
        request, itinerary = _build(document)
        email = draft_tour_summary(itinerary, request.agent, buyer_email="buyer@example.com", settings=settings)
        link = email.mailto_url(cc=request.agent.email)
        assert link.startswith("mailto:buyer@example.com?subject=Tour%20Itinerary")
        assert link.endswith("&cc=chak%40example.com")


class TestDraftLinks:
    """mailto links for drafts that are meant to be sent."""

    def test_appointment_request_link(self, document, settings) -> None:
        request, itinerary = _build(document)
        link = draft_appointment_requests(itinerary, request.agent, settings)[0].mailto_url()
        assert link.startswith("mailto:sara@example.com?subject=Showing%20Request%3A%20456%20Oak%20Dr")
        assert link.endswith("&cc=chak%40example.com")

    def test_sent_update_link(self, document, settings) -> None:
        request, itinerary = _build(document)
        email = draft_updated_itinerary(
            itinerary, request.properties, request.agent,
            buyer_email="buyer@example.com", is_update_run=True, settings=settings,
        )
        link = email.mailto_url()
        assert link.startswith("mailto:buyer@example.com?subject=Updated%20Tour%20Itinerary")
        assert link.endswith("&cc=chak%40example.com")
