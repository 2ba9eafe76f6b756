"""Exceptions raised by the itinerary engine."""

from __future__ import annotations

from typing import Iterable, List


class ResaError(Exception):
    """Base class for every error the engine raises."""


class TourValidationError(ResaError, ValueError):
    """The input document cannot produce a tour.

    ``reasons`` holds one human-readable message per problem found.
    """

    def __init__(self, reasons: str | Iterable[str]):
        if isinstance(reasons, str):
            reasons = [reasons]
        self.reasons: List[str] = [reason for reason in reasons if reason]
        super().__init__("; ".join(self.reasons) or "Invalid tour input")


class ItineraryConsistencyError(ResaError, RuntimeError):
    """The assembled response failed a cross-check and was discarded."""
