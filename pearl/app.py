"""
FastAPI web application for pearl.

Serves the journey heatmap dashboard and a JSON view of the same data.
"""

import logging
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, Field

from pearl.bigquery_client import BigQueryClientError, JourneyClient
from pearl.config import CONFIG_PATH, Config, load_config
from pearl.heatmap_calculator import DateParseError, HeatmapData, build_heatmap_data

logger = logging.getLogger(__name__)

app = FastAPI(
    title="pearl",
    description="London Oyster journey analytics dashboard",
    version="0.1.0",
)

templates = Jinja2Templates(directory=Path(__file__).parent / "templates")

LOAD_ERROR_DETAIL = "failed to load journey data"


class CellResponse(BaseModel):
    """One day in the heatmap grid."""

    is_placeholder: bool = Field(..., description="Day is after today")
    level: int = Field(..., ge=0, le=4, description="Intensity level (0-4)")
    description: str
    count: int = Field(..., ge=0)


class MonthLabelResponse(BaseModel):
    """Month label positioned over the week columns."""

    name: str
    offset: int = Field(..., ge=0, description="Left edge in pixels")
    width: int = Field(..., ge=0, description="Span width in pixels")


class HeatmapResponse(BaseModel):
    """Trailing 53-week heatmap with summary statistics."""

    weeks: list[list[CellResponse]]
    month_labels: list[MonthLabelResponse]
    total_count: int
    active_day_count: int
    busiest_date_label: str


def _get_config() -> Config:
    """Return the config set by `pearl serve`, or load it from CONFIG_PATH."""
    config = getattr(app.state, "config", None)
    if config is None:
        config = load_config(CONFIG_PATH)
    return config


def _load_heatmap_data() -> HeatmapData:
    """
    Fetch journey activity and build the heatmap payload.

    Raises:
        HTTPException: 500 with a generic message on any config, fetch or
            parse error. The underlying error is only logged.
    """
    today = datetime.now(timezone.utc).date()

    try:
        config = _get_config()
        with JourneyClient(config.bigquery.project_id, config.bigquery.dataset) as client:
            activity = client.fetch_activity()
        return build_heatmap_data(activity, today=today)
    except ValueError as e:
        # Covers invalid configuration and DateParseError
        kind = "parsing journey dates" if isinstance(e, DateParseError) else "loading config"
        logger.error("%s: %s", kind, e)
        raise HTTPException(status_code=500, detail=LOAD_ERROR_DETAIL)
    except BigQueryClientError as e:
        logger.error("querying bigquery: %s", e)
        raise HTTPException(status_code=500, detail=LOAD_ERROR_DETAIL)


@app.get("/health", response_class=PlainTextResponse)
def health_check():
    """Liveness check."""
    return "ok"


@app.get("/", response_class=HTMLResponse)
def index(request: Request):
    """Render the heatmap page."""
    data = _load_heatmap_data()
    return templates.TemplateResponse(request, "heatmap.html", asdict(data))


@app.get("/api/heatmap", response_model=HeatmapResponse)
def get_heatmap():
    """
    Get the trailing 53-week heatmap.

    Returns:
        JSON with the week grid, month labels and last-year statistics
    """
    return asdict(_load_heatmap_data())
