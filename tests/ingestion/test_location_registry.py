"""
Tests for the location registries
"""

import pytest
from unittest.mock import Mock
import requests

from salinity_monitor.config import DEFAULT_LOCATIONS
from salinity_monitor.exceptions import ConfigurationError, LocationRegistryError
from salinity_monitor.ingestion.location_registry import BackendLocationRegistry, StaticLocationRegistry


class TestStaticLocationRegistry:
    """Test cases for StaticLocationRegistry"""

    def test_default_locations(self):
        locations = StaticLocationRegistry(DEFAULT_LOCATIONS).get_locations()

        assert [location.name for location in locations] == ["North Field", "South Field"]
        assert locations[0].latitude == 28.6139

    def test_invalid_records_are_skipped(self):
        records = [
            {"name": "Good Field", "latitude": 10.0, "longitude": 20.0},
            {"name": "No Coordinates"},
            {"name": "Off Planet", "latitude": 123.0, "longitude": 0.0},
        ]

        locations = StaticLocationRegistry(records).get_locations()

        assert [location.name for location in locations] == ["Good Field"]


class TestBackendLocationRegistry:
    """Test cases for BackendLocationRegistry"""

    @pytest.fixture
    def session(self):
        return Mock(spec=requests.Session)

    @pytest.fixture
    def registry(self, session):
        return BackendLocationRegistry("https://backend.example/", timeout=5, session=session)

    def test_requires_base_url(self, session):
        with pytest.raises(ConfigurationError):
            BackendLocationRegistry(None, session=session)

    def test_get_locations(self, registry, session):
        response = Mock()
        response.json.return_value = [
            {"id": 1, "name": "North Field", "latitude": 28.6139, "longitude": 77.2090},
            {"id": "loc-2", "name": "South Field", "latitude": 13.0827, "longitude": 80.2707, "area_ha": 4},
        ]
        session.get.return_value = response

        locations = registry.get_locations()

        session.get.assert_called_once_with("https://backend.example/api/entities/Location", timeout=5)
        assert [location.location_id for location in locations] == ["1", "loc-2"]

    def test_unreachable_registry_is_fatal(self, registry, session):
        session.get.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(LocationRegistryError):
            registry.get_locations()

    def test_http_error_is_fatal(self, registry, session):
        response = Mock()
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("503 Server Error")
        session.get.return_value = response

        with pytest.raises(LocationRegistryError):
            registry.get_locations()

    def test_non_list_response_is_fatal(self, registry, session):
        response = Mock()
        response.json.return_value = {"error": "unauthorized"}
        session.get.return_value = response

        with pytest.raises(LocationRegistryError):
            registry.get_locations()

    def test_registry_error_is_a_configuration_error(self):
        assert issubclass(LocationRegistryError, ConfigurationError)
