"""
Salinity Pipeline Orchestrator

Runs one estimation pass over every registered location:
1. Fetch current weather
2. Estimate soil moisture, salinity and NDVI
3. Classify the salinity risk tier
4. Build an automated reading
5. Persist the reading
6. Evaluate and dispatch an alert
7. Pause before the next location to respect the weather provider's rate limits

Locations are processed one at a time. A weather failure skips that location
only; reading and alert failures are logged independently of each other.
Registry and configuration errors abort the run.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from ..config import Settings
from ..exceptions import AlertDispatchError, PersistenceError, WeatherFetchError
from ..ingestion.location_registry import BackendLocationRegistry, StaticLocationRegistry
from ..ingestion.openweather_connector import OpenWeatherConnector
from ..models.estimator import EnvironmentalEstimator
from ..models.readings import AUTOMATED_SOURCE, Alert, EnvironmentalReading, Location
from ..models.risk import AlertPolicy, RiskClassifier
from ..storage.history_store import AlertHistoryStore, ReadingHistoryStore
from ..storage.sinks import BackendAlertSink, BackendReadingSink, FileAlertSink, FileReadingSink
from ..utils.http import create_session
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class RunSummary:
    """
    Outcome of one pipeline run

    Attributes:
        locations_total: Locations returned by the registry
        locations_processed: Locations that produced a reading
        locations_skipped: Names of locations whose weather fetch failed
        readings_saved: Readings the sink accepted
        alerts_dispatched: Alerts the sink accepted
        persistence_failures: Readings the sink rejected
        alert_failures: Alerts the sink rejected
        total_readings_persisted: Size of the reading history after the run (file sink only)
        readings: Readings produced during the run
        alerts: Alerts produced during the run
    """
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    locations_total: int = 0
    locations_processed: int = 0
    locations_skipped: List[str] = field(default_factory=list)
    readings_saved: int = 0
    alerts_dispatched: int = 0
    persistence_failures: int = 0
    alert_failures: int = 0
    total_readings_persisted: Optional[int] = None
    duration_seconds: float = 0.0
    readings: List[EnvironmentalReading] = field(default_factory=list)
    alerts: List[Alert] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "started_at": self.started_at.isoformat(),
            "locations_total": self.locations_total,
            "locations_processed": self.locations_processed,
            "locations_skipped": list(self.locations_skipped),
            "readings_saved": self.readings_saved,
            "alerts_dispatched": self.alerts_dispatched,
            "persistence_failures": self.persistence_failures,
            "alert_failures": self.alert_failures,
            "total_readings_persisted": self.total_readings_persisted,
            "duration_seconds": round(self.duration_seconds, 3)
        }


class PipelineOrchestrator:
    """
    Sequential, per-location salinity estimation pipeline
    """

    def __init__(
        self,
        registry,
        weather_source,
        reading_sink,
        alert_sink,
        estimator: Optional[EnvironmentalEstimator] = None,
        classifier: Optional[RiskClassifier] = None,
        alert_policy: Optional[AlertPolicy] = None,
        delay_seconds: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the orchestrator

        Args:
            registry: Object with get_locations() -> List[Location]
            weather_source: Object with fetch_observation(location) -> WeatherObservation
            reading_sink: Object with submit(reading) and flush()
            alert_sink: Object with submit(alert) and flush()
            estimator: Environmental estimator (defaults to humidity variant with jitter)
            classifier: Risk classifier
            alert_policy: Alert policy
            delay_seconds: Pause between locations
            sleep: Sleep function used for the pause
            clock: Returns the timestamp stamped on readings (defaults to UTC now)
        """
        self.registry = registry
        self.weather_source = weather_source
        self.reading_sink = reading_sink
        self.alert_sink = alert_sink
        self.estimator = estimator or EnvironmentalEstimator()
        self.classifier = classifier or RiskClassifier()
        self.alert_policy = alert_policy or AlertPolicy()
        self.delay_seconds = delay_seconds
        self.sleep = sleep
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def from_settings(cls, settings: Settings, **overrides) -> "PipelineOrchestrator":
        """
        Build an orchestrator from settings

        Raises:
            ConfigurationError: If required credentials or URLs are missing
        """
        session = create_session()

        weather_source = OpenWeatherConnector(
            api_key=settings.OPENWEATHER_API_KEY,
            api_url=settings.OPENWEATHER_URL,
            timeout=settings.REQUEST_TIMEOUT,
            session=session
        )

        if settings.LOCATION_SOURCE == "backend":
            registry = BackendLocationRegistry(settings.BACKEND_URL, timeout=settings.REQUEST_TIMEOUT, session=session)
        else:
            registry = StaticLocationRegistry(settings.LOCATIONS)

        if settings.SINK == "backend":
            reading_sink = BackendReadingSink(settings.BACKEND_URL, timeout=settings.REQUEST_TIMEOUT, session=session)
            alert_sink = BackendAlertSink(settings.BACKEND_URL, timeout=settings.REQUEST_TIMEOUT, session=session)
        else:
            reading_sink = FileReadingSink(ReadingHistoryStore(settings.READINGS_FILE, settings.MAX_HISTORY))
            alert_sink = FileAlertSink(AlertHistoryStore(settings.ALERTS_FILE, settings.MAX_HISTORY))

        estimator = EnvironmentalEstimator(
            variant=settings.SOIL_MOISTURE_VARIANT,
            apply_jitter=settings.APPLY_JITTER
        )

        options = dict(
            registry=registry,
            weather_source=weather_source,
            reading_sink=reading_sink,
            alert_sink=alert_sink,
            estimator=estimator,
            delay_seconds=settings.INTER_LOCATION_DELAY_SECONDS
        )
        options.update(overrides)
        return cls(**options)

    def build_reading(self, location: Location, observation) -> EnvironmentalReading:
        """Estimate and classify one observation into a reading"""
        soil_moisture, salinity, ndvi = self.estimator.estimate(observation)
        risk_tier = self.classifier.classify(salinity)

        return EnvironmentalReading(
            timestamp=self.clock(),
            location=location,
            salinity_index=salinity,
            soil_moisture_proxy=soil_moisture,
            ndvi_proxy=ndvi,
            rainfall_mm=observation.rainfall,
            temperature_celsius=observation.temperature,
            humidity_percent=observation.humidity,
            risk_tier=risk_tier,
            data_source=AUTOMATED_SOURCE,
            is_real_data=True
        )

    def process_location(self, location: Location, summary: RunSummary) -> Optional[EnvironmentalReading]:
        """
        Run the pipeline for a single location

        Returns:
            The reading, or None if the weather fetch failed
        """
        logger.info(f"Processing: {location.name}")

        # Step 1: Fetch weather
        try:
            observation = self.weather_source.fetch_observation(location)
        except WeatherFetchError as e:
            logger.bind(error=e.to_dict()).error(f"Failed to fetch weather for {location.name}: {e}")
            summary.locations_skipped.append(location.name)
            return None

        # Steps 2-4: Estimate, classify, build reading
        reading = self.build_reading(location, observation)
        summary.locations_processed += 1
        summary.readings.append(reading)

        logger.info(
            f"Collected data for {location.name}: "
            f"salinity {reading.salinity_index:.2f} dS/m ({reading.risk_tier.value}), "
            f"temperature {observation.temperature}°C, rainfall {observation.rainfall} mm"
        )

        # Step 5: Persist reading
        try:
            self.reading_sink.submit(reading)
            summary.readings_saved += 1
        except PersistenceError as e:
            summary.persistence_failures += 1
            logger.bind(error=e.to_dict()).error(f"Failed to save reading for {location.name}: {e}")

        # Step 6: Alert, attempted even if the reading was not saved
        alert = self.alert_policy.evaluate(location, reading.salinity_index, alert_date=reading.reading_date)
        if alert is not None:
            summary.alerts.append(alert)
            try:
                self.alert_sink.submit(alert)
                summary.alerts_dispatched += 1
                logger.info(f"Alert created for {location.name} ({alert.severity.value})")
            except AlertDispatchError as e:
                summary.alert_failures += 1
                logger.bind(error=e.to_dict()).error(f"Failed to dispatch alert for {location.name}: {e}")

        return reading

    @staticmethod
    def _buffered(sink) -> int:
        pending = getattr(sink, "pending", None)
        return len(pending) if isinstance(pending, list) else 0

    def _flush_sinks(self, summary: RunSummary) -> None:
        buffered = self._buffered(self.reading_sink)
        try:
            self.reading_sink.flush()
            total = getattr(self.reading_sink, "total_persisted", None)
            summary.total_readings_persisted = total if isinstance(total, int) else None
        except PersistenceError as e:
            summary.readings_saved -= buffered
            summary.persistence_failures += buffered
            logger.bind(error=e.to_dict()).error(f"Failed to persist {buffered} buffered reading(s): {e}")

        buffered = self._buffered(self.alert_sink)
        try:
            self.alert_sink.flush()
        except AlertDispatchError as e:
            summary.alerts_dispatched -= buffered
            summary.alert_failures += buffered
            logger.bind(error=e.to_dict()).error(f"Failed to persist {buffered} buffered alert(s): {e}")

    def run(self) -> RunSummary:
        """
        Run the pipeline over all registered locations

        Returns:
            RunSummary for the run

        Raises:
            LocationRegistryError: If the registry cannot be read
        """
        start_time = time.time()
        summary = RunSummary()
        logger.info(f"Starting salinity data collection at {summary.started_at.isoformat()}")

        locations = self.registry.get_locations()
        summary.locations_total = len(locations)

        for index, location in enumerate(locations):
            self.process_location(location, summary)

            if index < len(locations) - 1 and self.delay_seconds > 0:
                self.sleep(self.delay_seconds)

        self._flush_sinks(summary)
        summary.duration_seconds = time.time() - start_time

        logger.info(f"Saved {summary.readings_saved} new reading(s), dispatched {summary.alerts_dispatched} alert(s)")
        if summary.total_readings_persisted is not None:
            logger.info(f"Total readings in history: {summary.total_readings_persisted}")
        if summary.locations_skipped:
            logger.warning(f"Skipped {len(summary.locations_skipped)} location(s): {', '.join(summary.locations_skipped)}")
        logger.info(f"Run completed in {summary.duration_seconds:.2f}s")

        return summary
