"""FastAPI application serving the Monaco places map."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, List, Optional, Sequence

import httpx
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import FileResponse, StreamingResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field

import broadcast
import seed_loader
from config import Settings
from session import MapSession

FRONTEND_DIR = Path(__file__).resolve().parent / "frontend"


class PlaceOut(BaseModel):
    """A place on the map, enriched with Wikipedia data."""

    title: str = Field(description="Page title, also the list label and filter key")
    lat: float = Field(description="Latitude in decimal degrees")
    lon: float = Field(description="Longitude in decimal degrees")
    img_url: str = Field(description="Thumbnail URL, or the default image")
    summary: str = Field(default="", description="Intro extract (HTML), capped by the API")
    detail_url: str = Field(default="", description="Canonical Wikipedia URL")
    visible: bool = Field(default=True, description="Matches the current filter keyword")


class MarkerOut(BaseModel):
    id: int
    title: str
    lat: float
    lon: float
    visible: bool


class InfoWindowOut(BaseModel):
    title: Optional[str] = Field(default=None, description="Place shown in the info window, if open")
    content: str = Field(default="", description="Rendered info window HTML")


class StateOut(BaseModel):
    """Snapshot of the session consumed by the page."""

    is_loading: bool
    is_collapsed: bool
    keyword: str
    places: List[PlaceOut]
    markers: List[MarkerOut]
    error_messages: List[str]
    info_window: InfoWindowOut


class MapConfigOut(BaseModel):
    center_lat: float
    center_lon: float
    zoom: int


class FilterRequest(BaseModel):
    keyword: str = Field(default="", description="Case-insensitive substring of the place title")


class ReadyResponse(BaseModel):
    started: bool = Field(description="True only for the signal that started the fan-out")


def create_app(
    settings: Optional[Settings] = None,
    registry: Optional[Sequence[str]] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    generate_frontend_config: bool = True,
) -> FastAPI:
    settings = settings or Settings.load()
    if registry is None:
        registry = seed_loader.load_seed(settings.places_file)

    session = MapSession(settings, registry, transport=transport)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if generate_frontend_config:
            _generate_frontend_config()
        unsubscribers = session.subscribe(lambda: broadcast.publish(session.snapshot()))
        session.start()
        try:
            yield
        finally:
            for unsubscribe in unsubscribers:
                unsubscribe()
            if session.load_task is not None and not session.load_task.done():
                session.load_task.cancel()

    app = FastAPI(title="Monaco Places Map", lifespan=lifespan)
    app.state.session = session

    if FRONTEND_DIR.exists():
        app.mount("/frontend", StaticFiles(directory=FRONTEND_DIR), name="frontend")
    else:  # pragma: no cover - optional logging
        print(f"[WARN] Frontend directory missing: {FRONTEND_DIR}")

    @app.get("/", include_in_schema=False)
    def serve_frontend() -> FileResponse:
        index_path = FRONTEND_DIR / "index.html"
        if not index_path.exists():
            raise HTTPException(status_code=404, detail="Frontend UI is not available")
        return FileResponse(index_path)

    @app.get("/healthz", summary="Health check")
    def healthz() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/api/config", response_model=MapConfigOut, summary="Map options for the page")
    def map_config() -> MapConfigOut:
        return MapConfigOut(
            center_lat=settings.map_center_lat,
            center_lon=settings.map_center_lon,
            zoom=settings.map_zoom,
        )

    @app.get("/api/state", response_model=StateOut, summary="Current session snapshot")
    async def get_state() -> StateOut:
        return StateOut(**session.snapshot())

    @app.get("/api/places", response_model=List[PlaceOut], summary="Loaded places")
    def list_places(visible_only: bool = Query(False)) -> List[PlaceOut]:
        items = session.places.visible_items() if visible_only else list(session.places.items)
        return [PlaceOut(**place.to_dict()) for place in items]

    @app.post(
        "/api/map/ready",
        response_model=ReadyResponse,
        summary="Viewport-ready signal",
        description="The first call starts fetching every place; later calls are ignored.",
    )
    async def map_ready() -> ReadyResponse:
        return ReadyResponse(started=session.on_map_ready())

    @app.post("/api/filter", response_model=StateOut, summary="Filter places by title")
    async def filter_places(payload: FilterRequest) -> StateOut:
        session.filter(payload.keyword)
        return StateOut(**session.snapshot())

    @app.post(
        "/api/places/{index}/select",
        response_model=StateOut,
        summary="Select a place from the visible list",
    )
    async def select_place(index: int) -> StateOut:
        try:
            session.select(index)
        except IndexError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return StateOut(**session.snapshot())

    @app.post("/api/markers/{marker_id}/click", response_model=StateOut, summary="Marker click")
    async def click_marker(marker_id: int) -> StateOut:
        try:
            session.click_marker(marker_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"unknown marker {marker_id}") from exc
        return StateOut(**session.snapshot())

    @app.post("/api/list/toggle", response_model=StateOut, summary="Collapse or expand the list")
    async def toggle_list() -> StateOut:
        session.toggle_list()
        return StateOut(**session.snapshot())

    @app.get("/api/stream", summary="Server-sent state updates")
    async def stream() -> StreamingResponse:
        return StreamingResponse(
            broadcast.event_generator(session.snapshot()),
            media_type="text/event-stream",
        )

    return app


def _generate_frontend_config() -> None:
    """Ensure frontend/config.js is regenerated from the latest .env."""
    try:
        from scripts.gen_frontend_config import main as build_config
    except Exception as exc:  # pragma: no cover - defensive
        print(f"[WARN] Frontend config import failed: {exc}")
        return

    try:
        build_config()
    except Exception as exc:  # pragma: no cover - defensive
        print(f"[WARN] Frontend config generation failed: {exc}")


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=Settings.load().port)
