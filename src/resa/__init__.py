"""Real estate showing assistant: tour itineraries and email drafts."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("resa-tour-planner")
except PackageNotFoundError:  # pragma: no cover - fallback during local dev
    __version__ = "0.0.0"

from .assembler import generate
from .errors import ItineraryConsistencyError, ResaError, TourValidationError

__all__ = [
    "__version__",
    "generate",
    "ItineraryConsistencyError",
    "ResaError",
    "TourValidationError",
]
