"""
Tests for the command-line entry point and exit codes
"""

import json

import pytest
from unittest.mock import Mock, patch

from salinity_monitor import cli
from salinity_monitor.config import Settings
from salinity_monitor.exceptions import LocationRegistryError
from salinity_monitor.pipeline.orchestrator import RunSummary


@pytest.fixture(autouse=True)
def quiet_logging():
    with patch('salinity_monitor.cli.setup_logging'):
        yield


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        OPENWEATHER_API_KEY="test-key",
        READINGS_FILE=str(tmp_path / "readings.json"),
        ALERTS_FILE=str(tmp_path / "alerts.json"),
        LOCATIONS=[{"name": "Test Field", "latitude": 0, "longitude": 0}]
    )


class TestMain:
    """Test main() exit codes"""

    @patch('salinity_monitor.cli.run_once')
    @patch('salinity_monitor.cli.get_settings')
    def test_successful_run_exits_zero(self, mock_settings, mock_run, settings):
        mock_settings.return_value = settings
        summary = RunSummary()
        summary.locations_skipped.append("Broken Field")
        mock_run.return_value = summary

        assert cli.main([]) == 0
        mock_run.assert_called_once_with(settings, no_delay=False)

    @patch('salinity_monitor.cli.run_once')
    @patch('salinity_monitor.cli.get_settings')
    def test_no_delay_flag(self, mock_settings, mock_run, settings):
        mock_settings.return_value = settings
        mock_run.return_value = RunSummary()

        cli.main(["--no-delay"])

        mock_run.assert_called_once_with(settings, no_delay=True)

    @patch('salinity_monitor.cli.run_once')
    @patch('salinity_monitor.cli.get_settings')
    def test_fatal_error_exits_non_zero(self, mock_settings, mock_run, settings):
        mock_settings.return_value = settings
        mock_run.side_effect = LocationRegistryError("Location registry unreachable")

        assert cli.main([]) == 1

    @patch('salinity_monitor.cli.run_once')
    @patch('salinity_monitor.cli.get_settings')
    def test_unexpected_error_exits_non_zero(self, mock_settings, mock_run, settings):
        mock_settings.return_value = settings
        mock_run.side_effect = RuntimeError("boom")

        assert cli.main([]) == 1

    @patch('salinity_monitor.cli.get_settings')
    def test_missing_api_key_exits_non_zero(self, mock_settings, tmp_path):
        mock_settings.return_value = Settings(_env_file=None, OPENWEATHER_API_KEY=None)

        assert cli.main([]) == 1

    @patch('salinity_monitor.cli.get_settings')
    def test_invalid_settings_exit_non_zero(self, mock_settings):
        mock_settings.side_effect = lambda: Settings(_env_file=None, SINK="carrier-pigeon")

        assert cli.main([]) == 1


class TestRunOnce:
    """Test a full run with the weather provider mocked"""

    def test_run_once_writes_history(self, settings, tmp_path):
        response = Mock()
        response.json.return_value = {"main": {"temp": 38, "humidity": 40}, "rain": {"1h": 2}}

        with patch('salinity_monitor.utils.http.requests.Session.get', return_value=response):
            summary = cli.run_once(settings, no_delay=True)

        assert summary.readings_saved == 1
        readings = json.loads((tmp_path / "readings.json").read_text())
        assert readings[0]["location_name"] == "Test Field"
        assert readings[0]["risk_level"] == "moderate"
        assert not (tmp_path / "alerts.json").exists()


class TestLogLevel:
    """Test that a bad log level is reported as a configuration error"""

    @patch('salinity_monitor.cli.get_settings')
    def test_unknown_log_level_exits_non_zero(self, mock_settings):
        mock_settings.side_effect = lambda: Settings(_env_file=None, LOG_LEVEL="VERBOSE")

        assert cli.main([]) == 1
        cli.setup_logging.assert_called_once_with()

    @patch('salinity_monitor.cli.run_once')
    @patch('salinity_monitor.cli.get_settings')
    def test_log_level_is_passed_normalized(self, mock_settings, mock_run, tmp_path):
        mock_settings.return_value = Settings(_env_file=None, OPENWEATHER_API_KEY="test-key", LOG_LEVEL="debug")
        mock_run.return_value = RunSummary()

        assert cli.main([]) == 0
        cli.setup_logging.assert_called_once_with(log_level="DEBUG", log_dir=None)
