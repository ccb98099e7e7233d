"""Server-side model of the map surface: markers, info window and ready signal."""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Any, Dict, Optional

from config import Settings
from observable import Observable
from places import Place

INFOWINDOW_TEMPLATE = (
    '<div class="infowindow">'
    "<h3>{title}</h3>"
    '<img src="{img_url}" alt="{title}">'
    # extract is HTML produced by the MediaWiki extracts module
    '<div class="extract">{extract}</div>'
    '<a href="{full_url}" target="_blank" rel="noopener">Read more on Wikipedia</a>'
    "</div>"
)


class MapInitError(RuntimeError):
    """Map options are unusable; no markers can be placed."""


@dataclass
class Marker:
    id: int
    title: str
    lat: float
    lon: float
    visible: bool = True

    def set_visible(self, value: bool) -> None:
        self.visible = value

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "lat": self.lat, "lon": self.lon, "visible": self.visible}


def render_info_window(place: Place) -> str:
    return INFOWINDOW_TEMPLATE.format(
        title=escape(place.title),
        img_url=escape(place.img_url, quote=True),
        extract=place.summary,
        full_url=escape(place.detail_url, quote=True),
    )


class MapSurface:
    def __init__(self, settings: Settings) -> None:
        self.center = (settings.map_center_lat, settings.map_center_lon)
        self.zoom = settings.map_zoom
        self.initialized = False
        self.markers: Dict[int, Marker] = {}
        self._places: Dict[int, Place] = {}
        self._next_marker_id = 1
        self._ready_fired = False
        # title of the place whose info window is open, None when closed
        self.info_window: Observable[Optional[str]] = Observable(None)
        self.info_window_content = ""

    def initialize(self) -> None:
        lat, lon = self.center
        if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
            raise MapInitError(f"map center out of range: {lat}, {lon}")
        if not 0 <= self.zoom <= 21:
            raise MapInitError(f"map zoom out of range: {self.zoom}")
        self.initialized = True
        print(f"[MAP] initialized center={lat:.4f},{lon:.4f} zoom={self.zoom}")

    def notify_ready(self) -> bool:
        """Viewport-ready signal. True only the first time it fires."""
        if not self.initialized or self._ready_fired:
            return False
        self._ready_fired = True
        return True

    @property
    def ready_fired(self) -> bool:
        return self._ready_fired

    def add_marker(self, place: Place) -> Marker:
        marker = Marker(
            id=self._next_marker_id,
            title=place.title,
            lat=place.lat,
            lon=place.lon,
            visible=place.visible,
        )
        self._next_marker_id += 1
        self.markers[marker.id] = marker
        self._places[marker.id] = place

        place.is_visible.subscribe(marker.set_visible)
        return marker

    def click(self, marker_id: int) -> Place:
        place = self._places[marker_id]
        self.display_info_window(place)
        return place

    def display_info_window(self, place: Place) -> None:
        self.close_info_window()
        self.info_window_content = render_info_window(place)
        self.info_window.set(place.title)

    def close_info_window(self) -> None:
        self.info_window_content = ""
        self.info_window.set(None)
