import pytest

from tests.unit.fakes import FakeClock, FixedRng


@pytest.fixture
def rng():
    return FixedRng()


@pytest.fixture
def clock():
    return FakeClock()
