import dataclasses

import pytest

from map_binding import MapInitError, MapSurface, render_info_window
from places import Place


def _place(title="Opéra de Monte-Carlo"):
    return Place(
        title=title,
        lat=43.7394,
        lon=7.4276,
        img_url="https://upload.wikimedia.org/opera.jpg",
        summary="<p>The <b>Opéra</b> is an opera house.</p>",
        detail_url="https://en.wikipedia.org/wiki/Op%C3%A9ra_de_Monte-Carlo",
    )


def test_initialize_rejects_bad_options(settings):
    with pytest.raises(MapInitError):
        MapSurface(dataclasses.replace(settings, map_zoom=40)).initialize()
    with pytest.raises(MapInitError):
        MapSurface(dataclasses.replace(settings, map_center_lat=123.0)).initialize()


def test_ready_fires_once_after_initialize(settings):
    surface = MapSurface(settings)
    assert surface.notify_ready() is False

    surface.initialize()

    assert surface.notify_ready() is True
    assert surface.notify_ready() is False
    assert surface.ready_fired is True


def test_marker_follows_place_visibility(settings):
    surface = MapSurface(settings)
    place = _place()
    marker = surface.add_marker(place)

    place.filter("museum")
    assert marker.visible is False
    assert [m.visible for m in surface.markers.values()] == [False]

    place.filter("opéra")
    assert marker.visible is True
    assert surface.markers[marker.id] is marker


def test_click_opens_info_window(settings):
    surface = MapSurface(settings)
    first = surface.add_marker(_place())
    second = surface.add_marker(_place("Fort Antoine Theatre"))

    surface.click(first.id)
    surface.click(second.id)

    assert surface.info_window.value == "Fort Antoine Theatre"
    assert "<h3>Fort Antoine Theatre</h3>" in surface.info_window_content


def test_click_unknown_marker(settings):
    with pytest.raises(KeyError):
        MapSurface(settings).click(42)


def test_render_info_window_escapes_title_keeps_extract():
    place = _place('Bar <script>"x"</script>')

    html = render_info_window(place)

    assert "&lt;script&gt;" in html
    assert "<p>The <b>Opéra</b> is an opera house.</p>" in html
    assert 'href="https://en.wikipedia.org/wiki/Op%C3%A9ra_de_Monte-Carlo"' in html
