"""FastAPI application exposing the generate operation."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

import structlog
import uvicorn
from fastapi import Body, FastAPI, HTTPException
from pydantic import BaseModel

from . import __version__
from .assembler import generate
from .config import ServiceInfo, Settings
from .errors import ItineraryConsistencyError, TourValidationError
from .main import configure_logging
from .models import ResaResponse

LOGGER = structlog.get_logger(__name__)

app = FastAPI(title="RESA Showing Assistant", version=__version__)


class GenerateResponse(BaseModel):
    """Response schema for the /generate endpoint."""

    response: ResaResponse
    info: ServiceInfo


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok", "version": __version__}


@app.post("/generate", response_model=GenerateResponse)
def generate_tour(document: Dict[str, Any] = Body(...)) -> GenerateResponse:
    """Generate the itinerary and email drafts for a tour request."""

    properties = document.get("properties")
    LOGGER.info("api.generate.request", properties=len(properties) if isinstance(properties, list) else None)
    settings = Settings()
    try:
        response = generate(document, settings=settings)
    except TourValidationError as exc:
        raise HTTPException(status_code=422, detail={"reasons": exc.reasons}) from exc
    except ItineraryConsistencyError as exc:
        LOGGER.exception("api.generate.failed", error=str(exc))
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    info = ServiceInfo(
        generated_at=datetime.now(tz=timezone.utc).isoformat(),
        engine_version=__version__,
    )
    return GenerateResponse(response=response, info=info)


def serve() -> None:
    """Console script entrypoint running the API with uvicorn."""
    settings = Settings()
    configure_logging(settings.log_level)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
