"""
Environmental Estimator

Derives a soil-moisture proxy, a salinity index and an NDVI proxy from a
single weather observation. The model is a banded heuristic:
- Each input contributes through an ordered ladder of mutually exclusive bands
- Contributions are additive, so the index is monotonic in each input
- A small random jitter is applied after the deterministic step
- Final values are clamped to their valid ranges

The deterministic step (`base_salinity`, `base_ndvi`) and the jitter step
are separate so each can be checked on its own.
"""

import random
from typing import List, NamedTuple, Optional, Tuple

from .readings import WeatherObservation
from ..utils.logger import get_logger

logger = get_logger(__name__)


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]"""
    return max(low, min(value, high))


class EnvironmentalEstimate(NamedTuple):
    """Estimated soil and vegetation conditions for one observation"""
    soil_moisture_proxy: float
    salinity_index: float
    ndvi_proxy: float


class EnvironmentalEstimator:
    """
    Weather-driven soil salinity and vegetation estimator

    Args:
        variant: "humidity" weights humidity into soil moisture, "basic" uses
            rainfall alone with a wider jitter
        apply_jitter: Whether to add the random jitter terms
        rng: Random source (defaults to a private random.Random)
    """

    # Soil moisture
    MOISTURE_BASELINE = 25.0
    MOISTURE_RAINFALL_WEIGHT = 0.5
    MOISTURE_HUMIDITY_WEIGHT = 0.15
    MOISTURE_JITTER = {"humidity": 5.0, "basic": 10.0}

    # Salinity (dS/m)
    SALINITY_BASELINE = 1.0
    SALINITY_MIN = 0.5
    SALINITY_MAX = 8.0
    SALINITY_JITTER = 0.2

    DRY_SOIL = 20.0           # % moisture
    SEMI_DRY_SOIL = 30.0
    LOW_RAINFALL = 5.0        # mm
    MODERATE_RAINFALL = 15.0
    EXTREME_HEAT = 35.0       # °C
    HIGH_HEAT = 30.0

    # NDVI
    NDVI_BASELINE = 0.5
    NDVI_MIN = -0.2
    NDVI_MAX = 0.9
    NDVI_JITTER = 0.05

    def __init__(
        self,
        variant: str = "humidity",
        apply_jitter: bool = True,
        rng: Optional[random.Random] = None
    ):
        if variant not in self.MOISTURE_JITTER:
            raise ValueError(f"Unknown soil moisture variant: {variant}")

        self.variant = variant
        self.apply_jitter = apply_jitter
        self.rng = rng or random.Random()
        logger.debug(f"Initialized EnvironmentalEstimator (variant={variant}, jitter={apply_jitter})")

    def _symmetric_jitter(self, amplitude: float) -> float:
        """Uniform jitter in [-amplitude, amplitude)"""
        if not self.apply_jitter:
            return 0.0
        return (self.rng.random() - 0.5) * 2 * amplitude

    # --- Soil moisture ---------------------------------------------------

    def base_soil_moisture(self, observation: WeatherObservation) -> float:
        """Deterministic part of the soil moisture proxy"""
        moisture = self.MOISTURE_BASELINE + observation.rainfall * self.MOISTURE_RAINFALL_WEIGHT
        if self.variant == "humidity":
            moisture += observation.humidity * self.MOISTURE_HUMIDITY_WEIGHT
        return moisture

    def estimate_soil_moisture(self, observation: WeatherObservation) -> float:
        """
        Soil moisture proxy (%)

        Not clamped: heavy rainfall pushes it past the usual 20-45% range.
        """
        moisture = self.base_soil_moisture(observation)
        if self.apply_jitter:
            moisture += self.rng.random() * self.MOISTURE_JITTER[self.variant]
        return moisture

    # --- Salinity --------------------------------------------------------

    def moisture_contribution(self, soil_moisture: float) -> Tuple[float, Optional[str]]:
        if soil_moisture < self.DRY_SOIL:
            return 1.5, 'DRY_SOIL'
        elif soil_moisture < self.SEMI_DRY_SOIL:
            return 0.8, 'SEMI_DRY_SOIL'
        return 0.0, None

    def rainfall_contribution(self, rainfall_mm: float) -> Tuple[float, Optional[str]]:
        if rainfall_mm < self.LOW_RAINFALL:
            return 1.0, 'LOW_RAINFALL'
        elif rainfall_mm < self.MODERATE_RAINFALL:
            return 0.5, 'MODERATE_RAINFALL'
        return 0.0, None

    def temperature_contribution(self, temperature: float) -> Tuple[float, Optional[str]]:
        if temperature > self.EXTREME_HEAT:
            return 0.8, 'EXTREME_HEAT'
        elif temperature > self.HIGH_HEAT:
            return 0.4, 'HIGH_HEAT'
        return 0.0, None

    def base_salinity(
        self,
        observation: WeatherObservation,
        soil_moisture: float
    ) -> Tuple[float, List[str]]:
        """
        Deterministic salinity index before jitter and clamping

        Returns:
            Tuple of (salinity, triggered_bands)
        """
        salinity = self.SALINITY_BASELINE
        triggered = []

        for contribution, band in (
            self.moisture_contribution(soil_moisture),
            self.rainfall_contribution(observation.rainfall),
            self.temperature_contribution(observation.temperature),
        ):
            salinity += contribution
            if band:
                triggered.append(band)

        return salinity, triggered

    def estimate_salinity(self, observation: WeatherObservation, soil_moisture: float) -> float:
        """Salinity index (dS/m), jittered and clamped to [0.5, 8.0]"""
        salinity, triggered = self.base_salinity(observation, soil_moisture)
        logger.debug(f"Salinity base {salinity:.2f} dS/m, bands: {', '.join(triggered) or 'none'}")
        salinity += self._symmetric_jitter(self.SALINITY_JITTER)
        return clamp(salinity, self.SALINITY_MIN, self.SALINITY_MAX)

    # --- NDVI ------------------------------------------------------------

    def base_ndvi(self, observation: WeatherObservation, soil_moisture: float) -> float:
        """Deterministic NDVI proxy before jitter and clamping"""
        ndvi = self.NDVI_BASELINE

        if soil_moisture > 35:
            ndvi += 0.2
        elif soil_moisture > 25:
            ndvi += 0.1
        elif soil_moisture < 15:
            ndvi -= 0.2

        if 20 < observation.temperature < 30:
            ndvi += 0.1
        elif observation.temperature > 35:
            ndvi -= 0.15

        if observation.rainfall > 10:
            ndvi += 0.1

        return ndvi

    def estimate_ndvi(self, observation: WeatherObservation, soil_moisture: float) -> float:
        """NDVI proxy, jittered and clamped to [-0.2, 0.9]"""
        ndvi = self.base_ndvi(observation, soil_moisture)
        ndvi += self._symmetric_jitter(self.NDVI_JITTER)
        return clamp(ndvi, self.NDVI_MIN, self.NDVI_MAX)

    def estimate(self, observation: WeatherObservation) -> EnvironmentalEstimate:
        """
        Estimate soil moisture, salinity and NDVI for one observation

        Args:
            observation: Complete weather observation

        Returns:
            EnvironmentalEstimate (unpacks as a 3-tuple)
        """
        soil_moisture = self.estimate_soil_moisture(observation)
        salinity = self.estimate_salinity(observation, soil_moisture)
        ndvi = self.estimate_ndvi(observation, soil_moisture)

        logger.debug(
            f"Estimated moisture={soil_moisture:.1f}% salinity={salinity:.2f} dS/m ndvi={ndvi:.3f}"
        )
        return EnvironmentalEstimate(soil_moisture, salinity, ndvi)
