"""Environment-backed configuration helpers."""

from __future__ import annotations

from pathlib import Path
from dotenv import load_dotenv
import os
from dataclasses import dataclass

# .env next to app.py
load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env", override=False)

# fallback: repo root (backend lives in a subdirectory)
load_dotenv(dotenv_path=Path(__file__).resolve().parent.parent / ".env", override=False)

DEFAULT_PLACES_FILE = Path(__file__).resolve().parent / "data" / "places_to_visit.json"
DEFAULT_IMG_URL = (
    "http://upload.wikimedia.org/wikipedia/commons/thumb/e/ea/"
    "Flag_of_Monaco.svg/200px-Flag_of_Monaco.svg.png"
)


@dataclass(slots=True)
class Settings:
    port: int = 8080
    wiki_api_url: str = "https://en.wikipedia.org/w/api.php"
    wiki_user_agent: str = "monaco-places-map/1.0"
    http_timeout_sec: float = 10.0
    fetch_timeout_ms: int = 2000
    loading_grace_ms: int = 2000
    map_ready_timeout_ms: int = 0
    extract_chars: int = 300
    thumb_size_px: int = 200
    default_img_url: str = DEFAULT_IMG_URL
    map_center_lat: float = 43.7328
    map_center_lon: float = 7.4197
    map_zoom: int = 15
    google_maps_api_key: str | None = None
    places_file: str = str(DEFAULT_PLACES_FILE)

    @classmethod
    def load(cls) -> "Settings":
        return cls(
            port=int(os.getenv("PORT", "8080")),
            wiki_api_url=os.getenv("WIKI_API_URL", "https://en.wikipedia.org/w/api.php"),
            wiki_user_agent=os.getenv("WIKI_USER_AGENT", "monaco-places-map/1.0"),
            http_timeout_sec=float(os.getenv("HTTP_TIMEOUT_SEC", "10")),
            fetch_timeout_ms=int(os.getenv("FETCH_TIMEOUT_MS", "2000")),
            loading_grace_ms=int(os.getenv("LOADING_GRACE_MS", "2000")),
            map_ready_timeout_ms=int(os.getenv("MAP_READY_TIMEOUT_MS", "0")),
            extract_chars=int(os.getenv("EXTRACT_CHARS", "300")),
            thumb_size_px=int(os.getenv("THUMB_SIZE_PX", "200")),
            default_img_url=os.getenv("DEFAULT_IMG_URL", DEFAULT_IMG_URL),
            map_center_lat=float(os.getenv("MAP_CENTER_LAT", "43.7328")),
            map_center_lon=float(os.getenv("MAP_CENTER_LON", "7.4197")),
            map_zoom=int(os.getenv("MAP_ZOOM", "15")),
            google_maps_api_key=os.getenv("GOOGLE_MAPS_API_KEY"),
            places_file=os.getenv("PLACES_FILE", str(DEFAULT_PLACES_FILE)),
        )

    @property
    def fetch_timeout_sec(self) -> float:
        return self.fetch_timeout_ms / 1000

    @property
    def loading_grace_sec(self) -> float:
        return self.loading_grace_ms / 1000

    @property
    def map_ready_timeout_sec(self) -> float:
        return self.map_ready_timeout_ms / 1000
