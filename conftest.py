import pytest
import asyncio
from unittest.mock import AsyncMock
from httpx import AsyncClient, ASGITransport

from app.main import app
from app.core import redis as redis_module
from app.core.config import settings
from app.core.enums import RateFile
from app.services.rate_tables import RateTables
from app.services.regions import RegionDirectory


DISPATCH_TICKET_RATES = {
    "9x5x4 Incident Response": 60,
    "24x7x4 Response to site": 150,
    "SBD Business Day Resolution to site": 110,
    "NBD Resolution to site": 75,
    "2BD Resolution to site": 50,
    "3BD Resolution to site": 35,
}

DISPATCH_EXTRA_RATES = {
    "2 BD Resolution to site": 40,
    "3 BD Resolution to site": 30,
    "4 BD Resolution to site": 20,
}


def _base_rows(level: str, with_rate: float, without_rate: float):
    return [
        {
            "Country": "Germany",
            f"With Backfill Yearly Rate {level}": with_rate,
            f"Without Backfill Yearly Rate {level}": without_rate,
        },
        {
            "Country": "India",
            f"With Backfill Yearly Rate {level}": with_rate / 4,
            f"Without Backfill Yearly Rate {level}": without_rate / 4,
        },
    ]


def _level_rows(germany: dict, india: dict):
    return [
        {"Country": "Germany", **germany},
        {"Country": "India", **india},
    ]


@pytest.fixture
def rate_records():
    """Raw dataset rows keyed by file name, shaped like the JSON files"""
    records = {
        RateFile.BASE_L1.value: _base_rows("L1", 1000, 800),
        RateFile.BASE_L2.value: _base_rows("L2", 1200, 1000),
        RateFile.BASE_L3.value: _base_rows("L3", 1500, 1250),
        RateFile.BASE_L4.value: _base_rows("L4", 1800, 1500),
        RateFile.BASE_L5.value: _base_rows("L5", 2200, 1900),
        RateFile.SHORT_TERM.value: _level_rows(
            {"L1": 110, "L2": 130, "L3": 150, "L4": 170, "L5": 190},
            {"L1": 40, "L2": 45, "L3": 50, "L4": 55, "L5": 60},
        ),
        RateFile.LONG_TERM.value: _level_rows(
            {"L1": 90, "L2": 100, "L3": 120, "L4": 140, "L5": 160},
            {"L1": 30, "L2": 35, "L3": 40, "L4": 45, "L5": 50},
        ),
        RateFile.FULL_DAY_VISIT.value: _level_rows(
            {"L1": 40, "L2": 50, "L3": 60, "L4": 70, "L5": 80},
            {"L1": 15, "L2": 18, "L3": 21, "L4": 24, "L5": 27},
        ),
        RateFile.HALF_DAY_VISIT.value: _level_rows(
            {"L1": 25, "L2": 30, "L3": 35, "L4": 40, "L5": 45},
            {"L1": 9, "L2": 10, "L3": 12, "L4": 14, "L5": 16},
        ),
        RateFile.DISPATCH_TICKET.value: _level_rows(
            DISPATCH_TICKET_RATES,
            {k: v / 2 for k, v in DISPATCH_TICKET_RATES.items()},
        ),
        RateFile.DISPATCH_EXTRA.value: _level_rows(
            DISPATCH_EXTRA_RATES,
            {k: v / 2 for k, v in DISPATCH_EXTRA_RATES.items()},
        ),
    }
    return records


@pytest.fixture
def rate_tables(rate_records):
    return RateTables.from_records(rate_records)


@pytest.fixture
def region_directory():
    return RegionDirectory(
        {
            "Europe": ["Germany", "France"],
            "Asia": ["India"],
        },
        {
            "Germany": "EUR",
            "India": "INR",
        },
    )


@pytest.fixture
def valid_quote_data():
    """Request body whose example breakdown totals 2077"""
    return {
        "companyName": "Acme Field Services",
        "region": "Europe",
        "country": "Germany",
        "serviceLevel": "L2",
        "backfillOption": "with",
        "contractDuration": "long-term",
        "projectDuration": 6,
        "visitType": "full-day",
        "dayVisitCount": 3,
        "dispatchPriority": "NBD Resolution to site",
        "dispatchPricing": "2 BD Resolution to site",
        "distanceFromProjectSite": 80,
    }


@pytest.fixture
def mock_redis(monkeypatch):
    """In-memory stand-in for the async Redis client"""
    store = {}

    async def _get(key):
        return store.get(key)

    async def _set(key, value, ex=None):
        store[key] = value.encode() if isinstance(value, str) else value
        return True

    async def _incr(key):
        store[key] = str(int(store[key]) + 1).encode()
        return int(store[key])

    client = AsyncMock()
    client.get.side_effect = _get
    client.set.side_effect = _set
    client.incr.side_effect = _incr
    client.store = store

    monkeypatch.setattr(redis_module, "redis", client)
    yield client


@pytest.fixture
async def test_client(rate_tables, region_directory):
    app.state.rate_tables = rate_tables
    app.state.region_directory = region_directory

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    del app.state.rate_tables
    del app.state.region_directory


@pytest.fixture
def app_settings():
    """Return application settings"""
    return settings


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "pricing: marks tests related to pricing"
    )
    config.addinivalue_line(
        "markers", "rate_limit: marks tests related to rate limiting"
    )
    config.addinivalue_line(
        "markers", "cache: marks tests related to quote caching"
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify test collection to handle asyncio tests
    """
    for item in items:
        if asyncio.iscoroutinefunction(item.function):
            item.add_marker(pytest.mark.asyncio)
