import pytest

from offer_service.segments import StaticSegmentResolver
from offer_service.service import OfferApplicationService
from offer_service.storage import OfferStore


@pytest.fixture
def store():
    return OfferStore()


@pytest.fixture
def resolver():
    return StaticSegmentResolver()


@pytest.fixture
def service(store, resolver):
    return OfferApplicationService(store, resolver)
