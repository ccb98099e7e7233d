"""Normalized place records built from MediaWiki page payloads."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, List

from typing_extensions import NotRequired, TypedDict

from observable import Observable

_THUMB_SIZE_RE = re.compile(r"\d+px")


class PlaceParseError(ValueError):
    """Page payload cannot be turned into a Place (usually missing coordinates)."""


class WikiCoordinates(TypedDict):
    lat: float
    lon: float
    primary: NotRequired[str]
    globe: NotRequired[str]


class WikiThumbnail(TypedDict):
    source: str
    width: NotRequired[int]
    height: NotRequired[int]


class WikiPage(TypedDict, total=False):
    pageid: int
    title: str
    coordinates: List[WikiCoordinates]
    thumbnail: WikiThumbnail
    extract: str
    fullurl: str
    missing: str


@dataclass(eq=False)
class Place:
    title: str
    lat: float
    lon: float
    img_url: str
    summary: str = ""
    detail_url: str = ""
    is_visible: Observable[bool] = field(default_factory=lambda: Observable(True), repr=False)

    @property
    def visible(self) -> bool:
        return self.is_visible.value

    def matches(self, keyword: str) -> bool:
        return (keyword or "").lower() in self.title.lower()

    def filter(self, keyword: str) -> None:
        """Show the place when its title contains the keyword, hide it otherwise."""
        self.is_visible.set(self.matches(keyword))

    @classmethod
    def from_page(cls, page: WikiPage, *, default_img_url: str, thumb_size_px: int = 200) -> "Place":
        if not isinstance(page, dict):
            raise PlaceParseError(f"page payload must be an object, got {type(page).__name__}")

        title = page.get("title")
        if not title or not isinstance(title, str):
            raise PlaceParseError(f"page has no usable title: {title!r}")

        lat, lon = _first_coordinates(page.get("coordinates"), title)

        thumbnail = page.get("thumbnail") or {}
        source = thumbnail.get("source") if isinstance(thumbnail, dict) else None
        if source:
            img_url = _THUMB_SIZE_RE.sub(f"{thumb_size_px}px", _text_field(source, "thumbnail.source", title), count=1)
        else:
            img_url = default_img_url

        return cls(
            title=title,
            lat=lat,
            lon=lon,
            img_url=img_url,
            summary=_text_field(page.get("extract"), "extract", title),
            detail_url=_text_field(page.get("fullurl"), "fullurl", title),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "lat": self.lat,
            "lon": self.lon,
            "img_url": self.img_url,
            "summary": self.summary,
            "detail_url": self.detail_url,
            "visible": self.visible,
        }


def _first_coordinates(raw: Any, title: str) -> tuple[float, float]:
    if not isinstance(raw, list) or not raw:
        raise PlaceParseError(f"{title!r} has no coordinates")
    first = raw[0]
    try:
        lat = float(first["lat"])
        lon = float(first["lon"])
    except (KeyError, TypeError, ValueError) as exc:
        raise PlaceParseError(f"{title!r} has malformed coordinates: {first!r}") from exc
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        raise PlaceParseError(f"{title!r} coordinates out of range: {lat}, {lon}")
    return lat, lon


def _text_field(value: Any, name: str, title: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise PlaceParseError(f"{title!r} has non-text {name}: {value!r}")
    return value
