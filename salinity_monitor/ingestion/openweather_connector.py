"""
OpenWeatherMap connector for current weather observations
"""

from typing import Optional, Dict, Any
import requests
from pydantic import ValidationError

from ..exceptions import ConfigurationError, WeatherFetchError
from ..models.readings import Location, WeatherObservation
from ..utils.http import create_session
from ..utils.logger import get_logger

logger = get_logger(__name__)


class OpenWeatherConnector:
    """
    Connector for the OpenWeatherMap current-weather endpoint

    Any transport error, HTTP error or malformed payload is reported as a
    WeatherFetchError; callers never receive a partial observation.
    """

    API_URL = "https://api.openweathermap.org/data/2.5/weather"

    def __init__(
        self,
        api_key: Optional[str],
        api_url: Optional[str] = None,
        timeout: int = 30,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize OpenWeatherMap connector

        Args:
            api_key: OpenWeatherMap API key
            api_url: Endpoint override (defaults to API_URL)
            timeout: Request timeout in seconds
            session: Preconfigured session (defaults to a no-retry session)
        """
        if not api_key:
            raise ConfigurationError("OPENWEATHER_API_KEY is not set")

        self.api_key = api_key
        self.api_url = api_url or self.API_URL
        self.timeout = timeout
        self.session = session or create_session()
        logger.info("OpenWeather Connector initialized")

    def fetch_raw(self, latitude: float, longitude: float) -> Dict[str, Any]:
        """
        Fetch the raw current-weather payload for a coordinate

        Raises:
            WeatherFetchError: If the request fails or the body is not JSON
        """
        params = {
            "lat": latitude,
            "lon": longitude,
            "appid": self.api_key,
            "units": "metric"
        }

        try:
            response = self.session.get(self.api_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise WeatherFetchError(
                "Weather provider returned an error",
                url=self.api_url,
                status_code=status,
                original_error=e
            ) from e
        except (requests.exceptions.RequestException, ValueError) as e:
            raise WeatherFetchError(
                "Weather provider unreachable or returned invalid JSON",
                url=self.api_url,
                original_error=e
            ) from e

    @staticmethod
    def parse_observation(raw_data: Dict[str, Any]) -> WeatherObservation:
        """
        Parse an OpenWeatherMap payload into a weather observation

        Rainfall is taken from the 1-hour window, then the 3-hour window,
        and defaults to 0 when neither is reported.

        Raises:
            WeatherFetchError: If temperature or humidity is missing or invalid
        """
        try:
            main = raw_data["main"]
            rain = raw_data.get("rain") or {}
            return WeatherObservation(
                temperature=main["temp"],
                humidity=main["humidity"],
                rainfall=rain.get("1h") or rain.get("3h") or 0.0
            )
        except (KeyError, TypeError, AttributeError, ValidationError) as e:
            raise WeatherFetchError("Malformed weather payload", original_error=e) from e

    def fetch_observation(self, location: Location) -> WeatherObservation:
        """
        Fetch the current weather observation for a location

        Args:
            location: Location to fetch weather for

        Returns:
            Complete WeatherObservation

        Raises:
            WeatherFetchError: If the observation cannot be obtained
        """
        try:
            raw_data = self.fetch_raw(location.latitude, location.longitude)
            observation = self.parse_observation(raw_data)
        except WeatherFetchError as e:
            e.location = location.name
            raise

        logger.debug(
            f"Weather for {location.name}: {observation.temperature}°C, "
            f"{observation.humidity}% humidity, {observation.rainfall} mm rain"
        )
        return observation
