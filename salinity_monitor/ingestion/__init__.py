"""
Data ingestion modules for the salinity monitor
"""

from .openweather_connector import OpenWeatherConnector
from .location_registry import BackendLocationRegistry, StaticLocationRegistry

__all__ = [
    'OpenWeatherConnector',
    'BackendLocationRegistry',
    'StaticLocationRegistry'
]
