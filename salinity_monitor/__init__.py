"""
Soil salinity monitor

Estimates soil salinity risk for field locations from live weather
observations, keeps a bounded reading history and raises threshold alerts.
"""

__version__ = "1.0.0"
