"""
Data models and estimation logic for the salinity monitor

This module includes:
- Location, weather, reading and alert models (Pydantic)
- The banded environmental estimator
- Risk classification and alert policy
"""

from .readings import (
    AUTOMATED_SOURCE,
    Alert,
    AlertSeverity,
    EnvironmentalReading,
    Location,
    RiskTier,
    WeatherObservation
)

from .estimator import EnvironmentalEstimate, EnvironmentalEstimator, clamp

from .risk import AlertPolicy, RiskClassifier

__all__ = [
    # Records
    'AUTOMATED_SOURCE',
    'Alert',
    'AlertSeverity',
    'EnvironmentalReading',
    'Location',
    'RiskTier',
    'WeatherObservation',

    # Estimation
    'EnvironmentalEstimate',
    'EnvironmentalEstimator',
    'clamp',

    # Risk
    'AlertPolicy',
    'RiskClassifier'
]
