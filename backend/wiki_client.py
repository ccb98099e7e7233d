"""Async MediaWiki client: one page lookup per place name."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from config import Settings
from places import WikiPage

# coordinates: marker position
# pageimages:  image for the list and the info window
# extracts:    short intro sample, capped at exchars characters
# info:        full URL of the page (inprop=url)
QUERY_PROPS = "coordinates|pageimages|extracts|info"


class WikiError(RuntimeError):
    """The API answered, but not with a usable query.pages payload."""


def build_params(title: str, extract_chars: int) -> Dict[str, Any]:
    return {
        "action": "query",
        "prop": QUERY_PROPS,
        "exintro": 1,
        "exchars": extract_chars,
        "inprop": "url",
        "format": "json",
        "titles": title,
    }


def first_page(data: Any) -> WikiPage:
    """Pages are keyed by an opaque page id; the first (and only) entry is the result."""
    try:
        pages = data["query"]["pages"]
    except (KeyError, TypeError) as exc:
        raise WikiError("response has no query.pages") from exc
    if not isinstance(pages, dict) or not pages:
        raise WikiError("query.pages is empty")
    page_id = next(iter(pages))
    return pages[page_id]


class WikipediaClient:
    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._settings = settings
        self._transport = transport

    async def fetch_page(self, title: str) -> WikiPage:
        params = build_params(title, self._settings.extract_chars)
        headers = {"User-Agent": self._settings.wiki_user_agent}
        async with httpx.AsyncClient(
            timeout=self._settings.http_timeout_sec,
            transport=self._transport,
        ) as client:
            response = await client.get(self._settings.wiki_api_url, params=params, headers=headers)
            response.raise_for_status()
            try:
                data = response.json()
            except ValueError as exc:
                raise WikiError(f"invalid JSON for {title!r}: {exc}") from exc
        return first_page(data)
