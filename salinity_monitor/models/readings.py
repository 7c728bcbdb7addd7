"""
Data models for the salinity monitor
"""

from datetime import datetime, date, timezone
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator
from enum import Enum


# Provenance tag for readings produced by the scheduled estimation run
AUTOMATED_SOURCE = "github_actions"


class RiskTier(str, Enum):
    """Salinity risk tiers"""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class AlertSeverity(str, Enum):
    """Alert severity levels"""
    WARNING = "warning"
    CRITICAL = "critical"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Location(BaseModel):
    """
    A monitored field location
    """
    id: Optional[str] = Field(None, description="Backend identifier, if the location came from the registry")
    name: str = Field(..., min_length=1, description="Field name")
    latitude: float = Field(..., ge=-90, le=90, description="Latitude")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude")

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v: Any) -> Optional[str]:
        """Backend ids may arrive as integers"""
        if v is None:
            return None
        return str(v)

    @property
    def location_id(self) -> str:
        """Identifier written to reading and alert records"""
        return self.id if self.id is not None else self.name

    class Config:
        frozen = True
        extra = "ignore"


class WeatherObservation(BaseModel):
    """
    Current weather at a location, as reported by the weather provider
    """
    temperature: float = Field(..., allow_inf_nan=False, description="Temperature in Celsius")
    humidity: float = Field(..., allow_inf_nan=False, description="Relative humidity percentage")
    rainfall: float = Field(0.0, allow_inf_nan=False, description="Rainfall over the last reporting window (mm)")

    @field_validator('temperature', 'humidity', 'rainfall', mode='before')
    @classmethod
    def reject_booleans(cls, v: Any) -> Any:
        """JSON true/false is not a measurement"""
        if isinstance(v, bool):
            raise ValueError(f"Expected a number, got {v!r}")
        return v

    @field_validator('rainfall', mode='before')
    @classmethod
    def default_rainfall(cls, v: Any) -> Any:
        """Missing rainfall means no rain was reported"""
        return 0.0 if v is None else v

    @field_validator('rainfall')
    @classmethod
    def validate_rainfall(cls, v: float) -> float:
        """Validate rainfall is non-negative"""
        if v < 0:
            raise ValueError(f"Rainfall {v}mm cannot be negative")
        return v

    class Config:
        frozen = True


class EnvironmentalReading(BaseModel):
    """
    One estimated reading for one location in one run
    """
    timestamp: datetime = Field(default_factory=_utcnow, description="When the reading was produced")
    location: Location = Field(..., description="Location the reading belongs to")
    salinity_index: float = Field(..., ge=0.5, le=8.0, description="Salinity index (dS/m)")
    soil_moisture_proxy: float = Field(..., description="Estimated soil moisture (%)")
    ndvi_proxy: float = Field(..., ge=-0.2, le=0.9, description="Estimated NDVI")
    rainfall_mm: float = Field(..., description="Rainfall (mm)")
    temperature_celsius: float = Field(..., description="Temperature (°C)")
    humidity_percent: float = Field(..., description="Humidity (%)")
    risk_tier: RiskTier = Field(..., description="Risk tier derived from the salinity index")
    data_source: str = Field(default=AUTOMATED_SOURCE, description="Provenance tag")
    is_real_data: bool = Field(default=True, description="Derived from live weather rather than demo data")

    @property
    def reading_date(self) -> date:
        return self.timestamp.date()

    def to_record(self) -> Dict[str, Any]:
        """Record submitted to the backend reading entity"""
        return {
            "location_id": self.location.location_id,
            "reading_date": self.reading_date.isoformat(),
            "salinity_level": self.salinity_index,
            "soil_moisture": self.soil_moisture_proxy,
            "rainfall_mm": self.rainfall_mm,
            "temperature_celsius": self.temperature_celsius,
            "humidity_percent": self.humidity_percent,
            "ndvi_value": self.ndvi_proxy,
            "risk_level": self.risk_tier.value,
            "data_source": self.data_source,
            "is_real_data": self.is_real_data
        }

    def to_file_record(self) -> Dict[str, Any]:
        """Rounded, self-describing record for the local readings file"""
        return {
            "timestamp": self.timestamp.isoformat(),
            "reading_date": self.reading_date.isoformat(),
            "location_id": self.location.location_id,
            "location_name": self.location.name,
            "latitude": self.location.latitude,
            "longitude": self.location.longitude,
            "salinity_level": round(self.salinity_index, 2),
            "soil_moisture": round(self.soil_moisture_proxy, 1),
            "rainfall_mm": round(self.rainfall_mm, 1),
            "temperature_celsius": round(self.temperature_celsius, 1),
            "humidity_percent": round(self.humidity_percent),
            "ndvi_value": round(self.ndvi_proxy, 3),
            "risk_level": self.risk_tier.value,
            "data_source": self.data_source,
            "is_real_data": self.is_real_data
        }

    class Config:
        frozen = True


class Alert(BaseModel):
    """
    Salinity alert for a location
    """
    location: Location = Field(..., description="Location the alert refers to")
    alert_type: str = Field(default="high_risk", description="Alert category")
    severity: AlertSeverity = Field(..., description="Alert severity")
    message: str = Field(..., description="Human-readable alert message")
    recommendation: str = Field(..., description="Recommended action")
    alert_date: date = Field(default_factory=lambda: _utcnow().date(), description="Date the alert was raised")

    def to_record(self) -> Dict[str, Any]:
        """Record submitted to the alert sink"""
        return {
            "location_id": self.location.location_id,
            "alert_type": self.alert_type,
            "severity": self.severity.value,
            "message": self.message,
            "recommendation": self.recommendation,
            "alert_date": self.alert_date.isoformat()
        }

    class Config:
        frozen = True
