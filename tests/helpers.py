"""
Test doubles shared across test modules
"""

from salinity_monitor.exceptions import WeatherFetchError


class FixedRandom:
    """Random source that always returns the same value"""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


class FakeWeatherSource:
    """Weather source keyed by location name; missing names fail"""

    def __init__(self, observations):
        self.observations = observations
        self.calls = []

    def fetch_observation(self, location):
        self.calls.append(location.name)
        if location.name not in self.observations:
            raise WeatherFetchError("Weather provider unreachable", location=location.name)
        return self.observations[location.name]
