import pytest

from liftbank import Building


@pytest.fixture
def building():
    """Ten floors, two elevators of capacity five, not yet started."""
    return Building(10, 2, 5)


@pytest.fixture
def running_building(building):
    building.start_system()
    return building
