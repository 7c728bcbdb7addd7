"""
Shared fixtures for salinity monitor tests
"""

import pytest

from salinity_monitor.models.readings import Location, WeatherObservation


@pytest.fixture
def test_location():
    """The reference test field"""
    return Location(name="Test Field", latitude=0, longitude=0)


@pytest.fixture
def hot_dry_observation():
    """Hot, dry weather used in the end-to-end scenario"""
    return WeatherObservation(temperature=38, humidity=40, rainfall=2)


@pytest.fixture
def mild_wet_observation():
    """Temperate, rainy weather"""
    return WeatherObservation(temperature=25, humidity=80, rainfall=20)
