"""
Utility modules for the salinity monitor
"""

from .http import create_session
from .logger import get_logger, setup_logging

__all__ = [
    'create_session',
    'get_logger',
    'setup_logging'
]
