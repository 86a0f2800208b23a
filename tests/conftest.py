import json
from pathlib import Path

import pytest

from tour_pricing.clients import InMemoryRateLookup
from tour_pricing.models import ItineraryDay, PriceCatalogEntry, RateLookupRow


FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(filename):
    """Helper to load a fixture file."""
    with open(FIXTURES_DIR / filename) as f:
        return json.load(f)


@pytest.fixture
def template_entries_data():
    """Load raw template price lists from fixture."""
    return load_fixture("catalog/template_entries.json")


@pytest.fixture
def template_entries(template_entries_data):
    """Template price lists as models."""
    return [PriceCatalogEntry(**entry) for entry in template_entries_data]


@pytest.fixture
def rate_rows():
    """Load room and vehicle rate rows from fixture."""
    return [RateLookupRow(**row) for row in load_fixture("rates/rate_rows.json")]


@pytest.fixture
def rate_lookup(rate_rows):
    """In-memory rate lookup over the fixture rows, exact meal plans only."""
    return InMemoryRateLookup(rate_rows)


@pytest.fixture
def two_day_itinerary_data():
    """Load the two-day itinerary request from fixture."""
    return load_fixture("itinerary/two_day_itinerary.json")


@pytest.fixture
def two_day_itinerary(two_day_itinerary_data):
    """Two-day itinerary as models."""
    return [ItineraryDay(**day) for day in two_day_itinerary_data]
