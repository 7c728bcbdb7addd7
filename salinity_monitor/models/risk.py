"""
Salinity risk classification and alert policy

Thresholds (dS/m) are inclusive on the lower bound of each tier:
- >= 8: critical
- >= 4: high
- >= 2: moderate
- otherwise low
"""

from datetime import date
from typing import Optional

from .readings import Alert, AlertSeverity, Location, RiskTier


class RiskClassifier:
    """Maps a salinity index to a risk tier"""

    CRITICAL_SALINITY = 8.0
    HIGH_SALINITY = 4.0
    MODERATE_SALINITY = 2.0

    def classify(self, salinity_index: float) -> RiskTier:
        if salinity_index >= self.CRITICAL_SALINITY:
            return RiskTier.CRITICAL
        elif salinity_index >= self.HIGH_SALINITY:
            return RiskTier.HIGH
        elif salinity_index >= self.MODERATE_SALINITY:
            return RiskTier.MODERATE
        return RiskTier.LOW


class AlertPolicy:
    """
    Decides whether a salinity index warrants an alert and builds it

    Every qualifying reading yields a new alert; there is no cooldown or
    de-duplication across runs.
    """

    CRITICAL_SALINITY = RiskClassifier.CRITICAL_SALINITY
    WARNING_SALINITY = RiskClassifier.HIGH_SALINITY

    CRITICAL_RECOMMENDATION = (
        "IMMEDIATE ACTION: Salinity is critically high. Most crops cannot survive. "
        "Implement urgent leaching practices."
    )
    WARNING_RECOMMENDATION = (
        "Action needed: Increase irrigation to leach salts, improve drainage."
    )

    def evaluate(
        self,
        location: Location,
        salinity_index: float,
        alert_date: Optional[date] = None
    ) -> Optional[Alert]:
        """
        Evaluate a salinity index for a location

        Args:
            location: Location the reading belongs to
            salinity_index: Salinity index (dS/m)
            alert_date: Date stamped on the alert (defaults to today, UTC)

        Returns:
            Alert, or None when the index is below the warning threshold
        """
        if salinity_index >= self.CRITICAL_SALINITY:
            severity = AlertSeverity.CRITICAL
            message = f"CRITICAL: Soil salinity at {salinity_index:.2f} dS/m in {location.name}"
            recommendation = self.CRITICAL_RECOMMENDATION
        elif salinity_index >= self.WARNING_SALINITY:
            severity = AlertSeverity.WARNING
            message = f"HIGH RISK: Soil salinity at {salinity_index:.2f} dS/m in {location.name}"
            recommendation = self.WARNING_RECOMMENDATION
        else:
            return None

        fields = dict(
            location=location,
            severity=severity,
            message=message,
            recommendation=recommendation
        )
        if alert_date is not None:
            fields['alert_date'] = alert_date
        return Alert(**fields)
