"""Session context: the single collection, map surface and loader of a running app."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional, Sequence

import httpx

from config import Settings
from loader import PlaceLoader
from map_binding import MapInitError, MapSurface
from places import Place
from places_list import PlacesList
from wiki_client import WikipediaClient

MAP_ERROR_MESSAGE = "Cannot load Google Map."


class MapSession:
    def __init__(
        self,
        settings: Settings,
        registry: Sequence[str],
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self.registry = tuple(registry)
        self.map = MapSurface(settings)
        self.places = PlacesList(display_place=self.map.display_info_window)
        self.loader = PlaceLoader(
            WikipediaClient(settings, transport=transport),
            self.places,
            self.map,
            timeout_sec=settings.fetch_timeout_sec,
            default_img_url=settings.default_img_url,
            thumb_size_px=settings.thumb_size_px,
        )
        self.load_task: Optional[asyncio.Task] = None
        self._watchdog: Optional[asyncio.TimerHandle] = None
        self._gave_up_on_map = False

    def start(self) -> bool:
        """Raise the loading flag and initialize the map. False if the map failed."""
        self.places.started_loading()
        try:
            self.map.initialize()
        except MapInitError as exc:
            print(f"[WARN] map initialization failed: {exc}")
            self._fail_map()
            return False

        if self.settings.map_ready_timeout_sec > 0:
            loop = asyncio.get_running_loop()
            self._watchdog = loop.call_later(self.settings.map_ready_timeout_sec, self._on_ready_timeout)
        return True

    def on_map_ready(self) -> bool:
        """Start the fan-out on the first viewport-ready signal. Later signals are ignored."""
        if self._gave_up_on_map or not self.map.notify_ready():
            return False
        if self._watchdog is not None:
            self._watchdog.cancel()
            self._watchdog = None
        print(f"[MAP] ready, fetching {len(self.registry)} places")
        self.load_task = asyncio.get_running_loop().create_task(
            self.loader.load_all(self.registry, self.settings.loading_grace_sec)
        )
        return True

    def _on_ready_timeout(self) -> None:
        self._watchdog = None
        if self.map.ready_fired:
            return
        print(f"[WARN] map did not report ready within {self.settings.map_ready_timeout_ms} ms")
        self._fail_map()

    def _fail_map(self) -> None:
        self._gave_up_on_map = True
        self.places.add_error(MAP_ERROR_MESSAGE)
        self.places.finished_loading(0)

    # -------- user actions ------------
    def filter(self, keyword: str) -> None:
        self.places.set_keyword(keyword)

    def select(self, index: int) -> Place:
        return self.places.select(index)

    def click_marker(self, marker_id: int) -> Place:
        return self.map.click(marker_id)

    def toggle_list(self) -> None:
        self.places.toggle_list()

    def subscribe(self, callback: Callable[[], None]) -> List[Callable[[], None]]:
        unsubscribers = self.places.subscribe(callback)
        unsubscribers.append(self.map.info_window.subscribe(lambda _title: callback()))
        return unsubscribers

    def snapshot(self) -> dict[str, Any]:
        return {
            "is_loading": self.places.is_loading.value,
            "is_collapsed": self.places.is_collapsed.value,
            "keyword": self.places.keyword.value,
            "places": [place.to_dict() for place in self.places.items],
            "markers": [marker.to_dict() for marker in self.map.markers.values()],
            "error_messages": self.places.error_messages.value,
            "info_window": {
                "title": self.map.info_window.value,
                "content": self.map.info_window_content,
            },
        }
