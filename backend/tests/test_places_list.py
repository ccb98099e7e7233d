import asyncio

import pytest

from places import Place
from places_list import PlacesList

IMG = "http://example.org/flag.png"


def _place(title):
    return Place(title=title, lat=43.73, lon=7.42, img_url=IMG)


def _filled(*titles, display=None):
    places = PlacesList(display_place=display)
    for title in titles:
        places.append(_place(title))
    return places


def _visible_titles(places):
    return [p.title for p in places.visible_items()]


def test_keyword_change_filters_items():
    places = _filled("Oceanographic Museum", "Fort Antoine Theatre", "Museum of Stamps and Coins")

    places.set_keyword("museum")

    assert _visible_titles(places) == ["Oceanographic Museum", "Museum of Stamps and Coins"]
    assert places.keyword.value == "museum"


def test_filter_is_idempotent():
    places = _filled("Oceanographic Museum", "Fort Antoine Theatre")

    places.set_keyword("fort")
    once = _visible_titles(places)
    places.set_keyword("fort")

    assert _visible_titles(places) == once == ["Fort Antoine Theatre"]


def test_empty_keyword_shows_everything():
    places = _filled("Oceanographic Museum", "Fort Antoine Theatre")
    places.set_keyword("zzz")
    assert _visible_titles(places) == []

    places.set_keyword("")

    assert _visible_titles(places) == ["Oceanographic Museum", "Fort Antoine Theatre"]


def test_appended_place_follows_current_keyword():
    places = _filled("Oceanographic Museum")
    places.set_keyword("garden")

    places.append(_place("Japanese Garden, Monaco"))
    places.append(_place("Opéra de Monte-Carlo"))

    assert _visible_titles(places) == ["Japanese Garden, Monaco"]
    assert len(places.items) == 3


def test_select_uses_visible_view_and_collapses():
    shown = []
    places = _filled("Oceanographic Museum", "Fort Antoine Theatre", "Museum of Stamps and Coins", display=shown.append)
    places.set_keyword("museum")

    selected = places.select(1)

    assert selected.title == "Museum of Stamps and Coins"
    assert shown == [selected]
    assert places.is_collapsed.value is True


def test_select_out_of_range():
    places = _filled("Oceanographic Museum")
    places.set_keyword("theatre")

    with pytest.raises(IndexError):
        places.select(0)
    assert places.is_collapsed.value is False


def test_toggle_list():
    places = PlacesList()

    places.toggle_list()
    assert places.is_collapsed.value is True
    places.toggle_list()
    assert places.is_collapsed.value is False


def test_errors_accumulate():
    places = PlacesList()

    places.add_error('Was not able to fetch "A"')
    places.add_error('Was not able to fetch "B"')

    assert places.error_messages.value == ['Was not able to fetch "A"', 'Was not able to fetch "B"']


def test_loading_is_not_reentrant():
    places = PlacesList()
    places.started_loading()

    with pytest.raises(RuntimeError):
        places.started_loading()
    assert places.is_loading.value is True


def test_finished_loading_waits_for_grace_delay():
    places = PlacesList()
    places.started_loading()

    async def scenario():
        places.finished_loading(0.05)
        assert places.is_loading.value is True
        await asyncio.sleep(0.01)
        assert places.is_loading.value is True
        await asyncio.sleep(0.1)
        return places.is_loading.value

    assert asyncio.run(scenario()) is False


def test_finished_loading_without_grace_clears_immediately():
    places = PlacesList()
    places.started_loading()

    places.finished_loading(0)

    assert places.is_loading.value is False


def test_subscribe_notifies_on_changes():
    places = PlacesList()
    calls = []
    unsubscribers = places.subscribe(lambda: calls.append(1))

    places.append(_place("Oceanographic Museum"))
    places.add_error("boom")
    places.toggle_list()
    places.set_keyword("ocean")
    assert len(calls) == 4

    for unsubscribe in unsubscribers:
        unsubscribe()
    places.toggle_list()
    assert len(calls) == 4
