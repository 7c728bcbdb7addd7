"""
Location registries: a static configured list or the backend Location entity
"""

from typing import Any, Dict, Iterable, List, Optional
import requests
from pydantic import ValidationError

from ..exceptions import ConfigurationError, LocationRegistryError
from ..models.readings import Location
from ..utils.http import create_session
from ..utils.logger import get_logger

logger = get_logger(__name__)


def _build_locations(records: Iterable[Dict[str, Any]], source: str) -> List[Location]:
    """Validate location records, skipping malformed ones"""
    locations = []
    for record in records:
        try:
            locations.append(Location.model_validate(record))
        except ValidationError as e:
            logger.warning(f"Skipping invalid location record from {source}: {record!r} ({e.error_count()} errors)")
    return locations


class StaticLocationRegistry:
    """Locations supplied by configuration"""

    def __init__(self, records: Iterable[Dict[str, Any]]):
        self.records = list(records)

    def get_locations(self) -> List[Location]:
        locations = _build_locations(self.records, "configuration")
        logger.info(f"Loaded {len(locations)} location(s) from configuration")
        return locations


class BackendLocationRegistry:
    """
    Locations read from the backend Location entity

    An unreachable registry or a response that is not a list of records is
    fatal for the run.
    """

    ENDPOINT = "/api/entities/Location"

    def __init__(
        self,
        base_url: Optional[str],
        timeout: int = 30,
        session: Optional[requests.Session] = None
    ):
        if not base_url:
            raise ConfigurationError("BACKEND_URL is required to read locations from the backend")

        self.url = base_url.rstrip("/") + self.ENDPOINT
        self.timeout = timeout
        self.session = session or create_session()

    def get_locations(self) -> List[Location]:
        """
        Fetch all locations from the backend

        Raises:
            LocationRegistryError: If the registry cannot be read
        """
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            raise LocationRegistryError(
                "Location registry unreachable",
                url=self.url,
                original_error=e
            ) from e

        if not isinstance(data, list):
            raise LocationRegistryError(
                f"Location registry returned {type(data).__name__}, expected a list",
                url=self.url
            )

        locations = _build_locations(data, "backend")
        logger.info(f"Found {len(locations)} location(s) in backend registry")
        return locations
