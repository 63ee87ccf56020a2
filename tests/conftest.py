import pytest

from tests.fakes import Household


@pytest.fixture
def household() -> Household:
    return Household()
