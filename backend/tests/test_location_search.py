import asyncio

import httpx
import pytest

from jobboard.client.api import ApiError
from jobboard.client.location_search import LocationSearch


def _result(name, lat=1.0, lon=2.0):
    return {
        "displayName": name,
        "latitude": lat,
        "longitude": lon,
        "address": {"street": "", "city": name, "state": "", "postalCode": "", "country": "es"},
    }


class FakeGeocoder:
    def __init__(self, delays=None):
        self.calls = []
        self.delays = delays or {}

    async def __call__(self, query):
        self.calls.append(query)
        await asyncio.sleep(self.delays.get(query, 0))
        return [_result(query)]


@pytest.mark.asyncio
async def test_debounce_fires_once_for_a_burst_of_keystrokes():
    geo = FakeGeocoder()
    search = LocationSearch(geo, debounce=0.05)
    for partial in ("Tar", "Tari", "Tarif", "Tarifa"):
        search.type(partial)
        await asyncio.sleep(0.01)
    await search.settle()
    assert geo.calls == ["Tarifa"]
    assert search.open is True
    assert search.results[0]["displayName"] == "Tarifa"


@pytest.mark.asyncio
async def test_short_queries_do_not_search_and_clear_results():
    geo = FakeGeocoder()
    search = LocationSearch(geo, debounce=0.01)
    search.type("Dakhla")
    await search.settle()
    assert search.results

    search.type("Da")
    await search.settle()
    assert geo.calls == ["Dakhla"]
    assert search.results == []
    assert search.open is False


@pytest.mark.asyncio
async def test_stale_response_is_discarded():
    geo = FakeGeocoder(delays={"Tarifa": 0.2, "Tarifa Spain": 0.0})
    search = LocationSearch(geo, debounce=0.01)
    search.type("Tarifa")
    await asyncio.sleep(0.05)  # first search is in flight
    search.type("Tarifa Spain")
    await search.settle()
    assert geo.calls == ["Tarifa", "Tarifa Spain"]
    assert [r["displayName"] for r in search.results] == ["Tarifa Spain"]


@pytest.mark.asyncio
async def test_failures_yield_no_results():
    async def failing(query):
        raise ApiError(503, "Search service unavailable")

    search = LocationSearch(failing, debounce=0.01)
    search.type("Tarifa")
    await search.settle()
    assert search.results == []
    assert search.open is False

    async def offline(query):
        raise httpx.ConnectError("no route")

    search = LocationSearch(offline, debounce=0.01)
    search.type("Tarifa")
    await search.settle()
    assert search.results == []


@pytest.mark.asyncio
async def test_select_and_click_outside():
    search = LocationSearch(FakeGeocoder(), debounce=0.01)
    search.type("Tarifa")
    await search.settle()

    search.click_outside()
    assert search.open is False
    assert search.query == "Tarifa"

    picked = search.select(search.results[0])
    assert picked["coordinates"] == {"latitude": 1.0, "longitude": 2.0}
    assert picked["address"]["country"] == "ES"
    assert search.open is False
