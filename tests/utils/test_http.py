"""
Tests for the shared HTTP session

Every external call is attempted exactly once per run.
"""

import threading
from http.server import BaseHTTPRequestHandler, HTTPServer

import pytest

from salinity_monitor.exceptions import WeatherFetchError
from salinity_monitor.ingestion.openweather_connector import OpenWeatherConnector
from salinity_monitor.utils.http import create_session


@pytest.fixture
def unavailable_server():
    """Local server that answers every request with 503 and counts hits"""
    hits = []

    class Handler(BaseHTTPRequestHandler):
        def do_GET(self):
            hits.append(self.path)
            self.send_response(503)
            self.send_header("Content-Type", "application/json")
            self.end_headers()
            self.wfile.write(b'{"message": "unavailable"}')

        def log_message(self, format, *args):
            pass

    server = HTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_port}/data/2.5/weather", hits
    finally:
        server.shutdown()
        server.server_close()


class TestCreateSession:
    """Test the default retry policy"""

    @pytest.mark.parametrize("scheme", ["http://", "https://"])
    def test_default_session_never_retries(self, scheme):
        session = create_session()

        retries = session.get_adapter(f"{scheme}example.com").max_retries

        assert retries.total == 0

    def test_retries_can_be_enabled_explicitly(self):
        session = create_session(max_retries=3, backoff_factor=0.5)

        retries = session.get_adapter("https://example.com").max_retries

        assert retries.total == 3
        assert retries.backoff_factor == 0.5

    def test_unavailable_provider_is_called_once(self, unavailable_server, test_location):
        url, hits = unavailable_server
        connector = OpenWeatherConnector(api_key="test-key", api_url=url, timeout=5, session=create_session())

        with pytest.raises(WeatherFetchError) as exc_info:
            connector.fetch_observation(test_location)

        assert len(hits) == 1
        assert exc_info.value.status_code == 503
