"""Shared fixtures for the showing assistant tests."""

from __future__ import annotations

import copy
from typing import Any, Dict

import pytest

from resa.config import Settings

SAMPLE_DOCUMENT: Dict[str, Any] = {
    "agent": {"name": "Chak Karri", "email": "chak@example.com", "phone": "512-555-1212"},
    "tour": {
        "tourName": "Smith Buyers Tour",
        "tourDate": "2025-12-20",
        "startTime": "10:00",
        "defaultShowingDurationMinutes": 15,
        "buyerEmail": "buyer@example.com",
        "isUpdateRun": False,
    },
    "properties": [
        {
            "address": "123 Main St, Austin, TX 78701",
            "mlsId": "1234567",
            "driveTimeFromPreviousMinutes": 0,
            "occupancy": "Vacant",
            "listingAgentName": "John Doe",
            "listingAgentEmail": "john@example.com",
            "isConfirmed": True,
            "order": 1,
        },
        {
            "address": "456 Oak Dr, Austin, TX 78702",
            "mlsId": "7654321",
            "driveTimeFromPreviousMinutes": 12,
            "occupancy": "Occupied",
            "listingAgentName": "Sara Agent",
            "listingAgentEmail": "sara@example.com",
            "isConfirmed": False,
            "order": 2,
        },
        {
            "address": "789 Pine Ln, Austin, TX 78703",
            "driveTimeFromPreviousMinutes": 8,
            "occupancy": "Unknown",
            "listingAgentName": "Mike Listing",
            "listingAgentEmail": "mike@example.com",
            "isConfirmed": True,
            "order": 3,
        },
    ],
}


@pytest.fixture
def document() -> Dict[str, Any]:
    """A fresh copy of the three-stop sample tour request."""
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture
def settings() -> Settings:
    return Settings(clock_format="12h", fallback_tour_name="Showing Tour", flag_new_confirmations=True)
