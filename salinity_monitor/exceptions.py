"""
Error taxonomy for the salinity monitor

Recoverable errors (weather fetch, persistence, alert dispatch) are caught
at the per-location boundary of the pipeline. Configuration and registry
errors are fatal and end the run with a non-zero exit status.
"""

from typing import Any, Dict, Optional


class SalinityMonitorError(Exception):
    """
    Base exception for the salinity monitor

    Attributes:
        message: Human-readable error description
        location: Name of the field location involved (if any)
        url: Target URL (if applicable)
        status_code: HTTP status code (if applicable)
        original_error: Wrapped exception (if any)
    """

    def __init__(
        self,
        message: str,
        location: Optional[str] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.location = location
        self.url = url
        self.status_code = status_code
        self.original_error = original_error
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.location:
            parts.append(f"(location: {self.location})")
        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")
        if self.original_error:
            parts.append(f"- {self.original_error}")
        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "location": self.location,
            "url": self.url,
            "status_code": self.status_code,
            "original_error": str(self.original_error) if self.original_error else None
        }


class WeatherFetchError(SalinityMonitorError):
    """Weather provider unreachable or returned a malformed payload"""


class PersistenceError(SalinityMonitorError):
    """Reading sink unreachable or rejected the write"""


class AlertDispatchError(SalinityMonitorError):
    """Alert sink unreachable or rejected the alert"""


class ConfigurationError(SalinityMonitorError):
    """Required configuration (credentials, URLs) is missing or invalid"""


class LocationRegistryError(ConfigurationError):
    """The location registry could not be read"""
