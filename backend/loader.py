"""Fan-out of place lookups, each raced against a timeout."""

from __future__ import annotations

import asyncio
from typing import Iterable, List, Optional

import httpx

from map_binding import MapSurface
from places import Place, PlaceParseError
from places_list import PlacesList
from wiki_client import WikiError, WikipediaClient


def fetch_error_message(name: str) -> str:
    return f'Was not able to fetch "{name}"'


class PlaceLoader:
    def __init__(
        self,
        client: WikipediaClient,
        places: PlacesList,
        map_surface: MapSurface,
        *,
        timeout_sec: float,
        default_img_url: str,
        thumb_size_px: int = 200,
    ) -> None:
        self._client = client
        self._places = places
        self._map = map_surface
        self._timeout_sec = timeout_sec
        self._default_img_url = default_img_url
        self._thumb_size_px = thumb_size_px

    async def lookup(self, name: str) -> Optional[Place]:
        """Fetch and parse one page. Any failure is reported as None."""
        try:
            page = await self._client.fetch_page(name)
            return Place.from_page(
                page,
                default_img_url=self._default_img_url,
                thumb_size_px=self._thumb_size_px,
            )
        except (httpx.HTTPError, WikiError, PlaceParseError) as exc:
            print(f"[WIKI] lookup failed for {name!r}: {exc}")
            return None
        except Exception as exc:  # network guardrail
            print(f"[WIKI] unexpected payload for {name!r}: {exc!r}")
            return None

    async def race(self, name: str) -> Optional[Place]:
        """First of: a valid Place from the lookup, or the timer.

        A failed lookup does not end the race early; the timer still decides
        when the failure is reported.
        """
        lookup = asyncio.ensure_future(self.lookup(name))
        timer = asyncio.ensure_future(asyncio.sleep(self._timeout_sec))
        try:
            done, _ = await asyncio.wait({lookup, timer}, return_when=asyncio.FIRST_COMPLETED)
            if lookup in done and lookup.result() is not None:
                return lookup.result()
            await timer
            return None
        finally:
            pending = [task for task in (lookup, timer) if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

    async def load_one(self, name: str) -> Optional[Place]:
        place = await self.race(name)
        if place is None:
            self._places.add_error(fetch_error_message(name))
            return None
        self._map.add_marker(place)
        self._places.append(place)
        print(f"[LOAD] {place.title!r} at {place.lat:.5f},{place.lon:.5f}")
        return place

    async def load_all(self, names: Iterable[str], grace_sec: float) -> List[Place]:
        """Issue every lookup at once; clear the loading flag after the last race resolves."""
        registry = list(names)
        try:
            results = await asyncio.gather(*(self.load_one(name) for name in registry))
        finally:
            self._places.finished_loading(grace_sec)
        loaded = [place for place in results if place is not None]
        print(f"[LOAD] {len(loaded)}/{len(registry)} places loaded")
        return loaded
