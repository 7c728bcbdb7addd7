"""
Persistence for readings and alerts
"""

from .history_store import MAX_HISTORY, AlertHistoryStore, BoundedJsonStore, ReadingHistoryStore
from .sinks import BackendAlertSink, BackendReadingSink, FileAlertSink, FileReadingSink

__all__ = [
    'MAX_HISTORY',
    'AlertHistoryStore',
    'BoundedJsonStore',
    'ReadingHistoryStore',
    'BackendAlertSink',
    'BackendReadingSink',
    'FileAlertSink',
    'FileReadingSink'
]
