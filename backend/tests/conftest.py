import asyncio
import dataclasses
import sys
from pathlib import Path

import httpx
import pytest

# Ensure the backend root is on sys.path for direct pytest runs
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from config import Settings  # noqa: E402

HANG = 30.0


def make_page(title, lat=43.73, lon=7.42, thumbnail=None, page_id="1"):
    page = {
        "pageid": int(page_id),
        "title": title,
        "extract": f"<p><b>{title}</b> is a place in Monaco.</p>",
        "fullurl": f"https://en.wikipedia.org/wiki/{title.replace(' ', '_')}",
    }
    if lat is not None:
        page["coordinates"] = [{"lat": lat, "lon": lon, "primary": "", "globe": "earth"}]
    if thumbnail:
        page["thumbnail"] = {"source": thumbnail, "width": 50, "height": 33}
    return {"batchcomplete": "", "query": {"pages": {page_id: page}}}


@pytest.fixture
def settings():
    return dataclasses.replace(
        Settings(),
        fetch_timeout_ms=200,
        loading_grace_ms=100,
        map_ready_timeout_ms=0,
    )


@pytest.fixture
def wiki_page():
    return make_page


@pytest.fixture
def wiki_transport():
    """Build a MockTransport from {title: (delay_sec, body)}.

    body is a dict (JSON payload), a str (raw text) or an int (HTTP status).
    Titles missing from the routes hang until cancelled.
    """

    def build(routes, seen=None):
        async def handler(request):
            title = request.url.params["titles"]
            if seen is not None:
                seen.append(title)
            delay, body = routes.get(title, (HANG, None))
            await asyncio.sleep(delay)
            if isinstance(body, int):
                return httpx.Response(body)
            if isinstance(body, str):
                return httpx.Response(200, text=body)
            return httpx.Response(200, json=body)

        return httpx.MockTransport(handler)

    return build
