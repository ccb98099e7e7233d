"""Observable list of places shared by the list view and the map."""

from __future__ import annotations

import asyncio
from typing import Callable, List, Optional

from observable import Observable, ObservableList, Unsubscribe
from places import Place


class PlacesList:
    def __init__(self, display_place: Optional[Callable[[Place], None]] = None) -> None:
        self.items: ObservableList[Place] = ObservableList()
        self.keyword: Observable[str] = Observable("")
        self.error_messages: ObservableList[str] = ObservableList()
        self.is_collapsed: Observable[bool] = Observable(False)
        self.is_loading: Observable[bool] = Observable(False)

        self._display_place = display_place
        self._loading_started = False
        self._loading_handle: Optional[asyncio.TimerHandle] = None

        self.keyword.subscribe(self.filter_list)

    # -------- collection -------------
    def append(self, place: Place) -> None:
        # new items follow the current keyword
        place.filter(self.keyword.value)
        self.items.append(place)

    def add_error(self, message: str) -> None:
        self.error_messages.append(message)

    def visible_items(self) -> List[Place]:
        return [place for place in self.items if place.visible]

    # -------- filtering / selection ---
    def filter_list(self, keyword: str) -> None:
        for item in self.items:
            item.filter(keyword)

    def set_keyword(self, keyword: str) -> None:
        value = keyword or ""
        if value == self.keyword.value:
            # re-run so a repeated keyword still recomputes visibility
            self.filter_list(value)
            return
        self.keyword.set(value)

    def toggle_list(self) -> None:
        self.is_collapsed.set(not self.is_collapsed.value)

    def select(self, index: int) -> Place:
        """Show the info window of the index-th visible place and collapse the list."""
        visible = self.visible_items()
        if index < 0 or index >= len(visible):
            raise IndexError(f"no visible place at position {index}")
        place = visible[index]
        self.is_collapsed.set(True)
        if self._display_place is not None:
            self._display_place(place)
        return place

    # -------- loading state -----------
    def started_loading(self) -> None:
        if self._loading_started:
            raise RuntimeError("loading already started for this session")
        self._loading_started = True
        self.is_loading.set(True)

    def finished_loading(self, grace_sec: float) -> None:
        """Clear the loading flag once the grace delay has elapsed."""
        if self._loading_handle is not None:
            return
        if grace_sec <= 0:
            self.is_loading.set(False)
            return
        loop = asyncio.get_running_loop()
        self._loading_handle = loop.call_later(grace_sec, self.is_loading.set, False)

    def subscribe(self, callback: Callable[[], None]) -> List[Unsubscribe]:
        """Call callback (without arguments) whenever any observable field changes."""
        observables = (self.items, self.keyword, self.error_messages, self.is_collapsed, self.is_loading)
        return [obs.subscribe(lambda _value: callback()) for obs in observables]
