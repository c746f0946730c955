import pytest
from conftest import make_place

from placefinder import config
from placefinder.browser import PlaceBrowser
from placefinder.favorites import FavoritesStore
from placefinder.geolocation import GeolocationErrorCode, LocationTracker
from placefinder.models import Bounds, Coordinates
from placefinder.repository import PlaceRepository
from placefinder.seed import seed_places
from placefinder.selection import SelectionController
from placefinder.storage import MemoryKeyValueStore


@pytest.fixture
def browser():
    store = MemoryKeyValueStore()
    return PlaceBrowser(
        PlaceRepository(seed_places()),
        FavoritesStore(store),
        LocationTracker(store=store, clock=lambda: 0.0),
    )


def ids(results):
    return [r.place.id for r in results]


def test_default_view_uses_default_center_and_radius(browser):
    assert browser.spatial_context().reference == Coordinates(*config.default_center())
    assert browser.results() == []
    browser.search_radius(10_000)
    assert ids(browser.results()) == ["3", "1", "2"]


def test_results_follow_location_updates(browser):
    browser.tracker.update(37.4999, 127.0366)
    results = browser.results()
    assert ids(results)[0] == "1"
    assert results[0].distance_m == 0.0


def test_location_error_keeps_results_available(browser):
    browser.tracker.fail(GeolocationErrorCode.PERMISSION_DENIED)
    browser.search_radius(10_000)
    assert ids(browser.results()) == ["3", "1", "2"]


def test_favorite_toggle_is_reflected_in_results(browser):
    browser.search_radius(10_000)
    assert browser.toggle_favorite("2") is True
    assert browser.is_favorite("2")
    flags = {r.place.id: r.is_favorite for r in browser.results()}
    assert flags == {"3": False, "1": False, "2": True}

    browser.update_filter(favorites_only=True)
    assert ids(browser.results()) == ["2"]
    browser.toggle_favorite("2")
    assert browser.results() == []


def test_category_toggle_and_keyword(browser):
    browser.search_radius(config.MAX_RADIUS_M)
    browser.toggle_category(config.CATEGORY_ASSOCIATION)
    browser.toggle_category(config.CATEGORY_AGGREGATE)
    assert ids(browser.results()) == ["2", "7", "5"]
    browser.update_filter(keyword="인천")
    assert ids(browser.results()) == ["5"]


def test_viewport_search_then_back_to_radius(browser):
    bounds = Bounds(Coordinates(37.49, 127.02), Coordinates(37.52, 127.06))
    browser.search_viewport(bounds)
    assert ids(browser.results()) == ["1", "3", "2"]
    browser.search_radius()
    assert browser.filter.map_bounds is None
    assert browser.results() == []


def test_added_places_show_up_in_results(browser):
    added = browser.add_places([make_place("new"), make_place("1")])
    assert [p.id for p in added] == ["new"]
    results = browser.results()
    assert ids(results) == ["new"]
    assert results[0].distance_label == "0m"


def test_selection(browser):
    place = browser.repository.get("3")
    browser.select(place)
    assert browser.selected() is place
    assert browser.selection.is_selected("3")
    assert not browser.selection.is_selected("1")
    browser.select(None)
    assert browser.selected() is None


def test_selection_controller_clear():
    selection = SelectionController()
    assert selection.current() is None
    selection.select(make_place("a"))
    selection.clear()
    assert selection.current() is None
    assert not selection.is_selected("a")
